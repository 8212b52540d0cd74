from __future__ import annotations

"""Fire-and-forget feedback requests with a deterministic local fallback.

`dispatch` never blocks on the network: it starts a daemon worker and
returns a ticket at once. `ticket.text(timeout)` waits at most `timeout`
seconds and falls back to the local template when the remote text did not
arrive or failed.
"""

import threading
from typing import Optional, Sequence

from ..app import explain
from ..app.game_registry import get_game
from ..errors import FeedbackUnavailable
from ..results.schema import SessionRecord
from .client import FeedbackClient


def local_feedback(record: SessionRecord, history: Sequence[SessionRecord] = ()) -> str:
    accuracy_percent = int(round(record.accuracy * 100))
    parts = [f"Great job! You scored {record.final_score} points with {accuracy_percent}% accuracy!"]
    previous = [r for r in history if r.session_id != record.session_id]
    if previous and record.final_score > previous[-1].final_score:
        parts.append(f"You improved from your last score of {previous[-1].final_score}!")
    try:
        skill = get_game(record.game_kind).skill
    except KeyError:
        skill = "thinking skills"
    parts.append(f"Keep practicing to build your {skill}!")
    return " ".join(parts)


class FeedbackTicket:
    def __init__(self, fallback: str) -> None:
        self.fallback = fallback
        self._done = threading.Event()
        self._text: Optional[str] = None
        self.error: Optional[BaseException] = None

    def _resolve(self, text: Optional[str], error: Optional[BaseException] = None) -> None:
        self._text = text
        self.error = error
        self._done.set()

    def done(self) -> bool:
        return self._done.is_set()

    @property
    def source(self) -> str:
        return "remote" if self.done() and self._text else "local"

    def text(self, timeout: Optional[float] = 0.0) -> str:
        """Remote feedback if it arrived within `timeout` seconds, else the fallback."""
        if timeout is None or timeout > 0:
            self._done.wait(timeout)
        if self._done.is_set() and self._text:
            return self._text
        return self.fallback


class FeedbackDispatcher:
    def __init__(self, client: Optional[FeedbackClient] = None) -> None:
        self.client = client

    def dispatch(self, record: SessionRecord, history: Sequence[SessionRecord] = ()) -> FeedbackTicket:
        ticket = FeedbackTicket(local_feedback(record, history))
        if self.client is None:
            ticket._resolve(None)
            return ticket
        worker = threading.Thread(
            target=self._run,
            args=(ticket, record, list(history)),
            name=f"feedback-{record.session_id[:8]}",
            daemon=True,
        )
        worker.start()
        return ticket

    def _run(self, ticket: FeedbackTicket, record: SessionRecord, history: Sequence[SessionRecord]) -> None:
        assert self.client is not None
        try:
            text = self.client.request_feedback(record, history)
        except FeedbackUnavailable as exc:
            explain.trace_error("feedback_unavailable", exc, session=record.session_id)
            ticket._resolve(None, exc)
            return
        except Exception as exc:
            # anything else from the client still only costs the remote text
            explain.trace_error("feedback_failed", exc, session=record.session_id)
            ticket._resolve(None, exc)
            return
        explain.trace("feedback_received", {"session": record.session_id, "chars": len(text)})
        ticket._resolve(text)
