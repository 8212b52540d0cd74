from __future__ import annotations

"""Session Manager: orchestrates games, persistence and feedback.

Builds a controller for the configured game and, once the session
finishes, turns it into a SessionRecord, saves it (best effort), derives
history stats and dispatches feedback without waiting for it. It is
front-end agnostic: a CLI or any other presentation layer drives the
controller through its public operations and subscribes to its bus.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..engine.controller import GameController, TimerFactory
from ..errors import PersistenceFailure
from ..feedback.client import FeedbackClient
from ..feedback.dispatcher import FeedbackDispatcher, FeedbackTicket
from ..results.parquet_store import ParquetSessionStore
from ..results.result_manager import ResultManager, SessionStore
from ..results.schema import HistoryStats, SessionRecord
from ..stats.stats import format_summary, history_stats, recommendations, summarize
from ..util.randomness import make_rng
from .events import EventBus
from .explain import trace as xtrace, trace_error
from .presets import GameConstants, constants_for


@dataclass
class SessionOutcome:
    record: SessionRecord
    stats: HistoryStats
    summary: str
    feedback: FeedbackTicket
    tips: List[str] = field(default_factory=list)
    saved: bool = True


def make_store(cfg: Dict[str, Any]) -> SessionStore:
    storage = cfg.get("storage", {})
    if storage.get("backend") == "parquet":
        return ParquetSessionStore(Path(storage.get("data_dir", "./storage/data")))
    return ResultManager()


def make_dispatcher(cfg: Dict[str, Any]) -> FeedbackDispatcher:
    if not cfg.get("feedback", {}).get("enabled"):
        return FeedbackDispatcher(None)
    return FeedbackDispatcher(FeedbackClient.from_config(cfg))


class SessionManager:
    def __init__(
        self,
        cfg: Dict[str, Any],
        *,
        store: Optional[SessionStore] = None,
        dispatcher: Optional[FeedbackDispatcher] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.cfg = cfg
        self.store = store if store is not None else make_store(cfg)
        self.dispatcher = dispatcher if dispatcher is not None else make_dispatcher(cfg)
        self.bus = bus or EventBus()
        self.controller: Optional[GameController] = None
        self.constants: Optional[GameConstants] = None
        self.user_id: Optional[str] = cfg.get("session", {}).get("user_id")
        self.session_id: Optional[str] = None
        self.outcome: Optional[SessionOutcome] = None

    def start_session(
        self,
        game: Optional[str] = None,
        *,
        user_id: Optional[str] = None,
        seed: Optional[int] = None,
        timer_factory: Optional[TimerFactory] = None,
        clock=None,
    ) -> GameController:
        """Build the controller for `game`; the caller then drives it."""
        session_cfg = self.cfg.get("session", {})
        kind = game or session_cfg.get("game", "color_trap")
        # Resolve constants: preset -> config overrides
        overrides = self.cfg.get("games", {}).get(kind, {})
        self.constants = constants_for(kind, overrides)
        if user_id is not None:
            self.user_id = user_id
        if seed is None:
            seed = session_cfg.get("seed")
        self.session_id = str(uuid4())
        self.outcome = None
        kwargs: Dict[str, Any] = {}
        if clock is not None:
            kwargs["clock"] = clock
        self.controller = GameController(
            kind,
            self.constants,
            rng=make_rng(seed),
            bus=self.bus,
            timer_factory=timer_factory,
            **kwargs,
        )
        xtrace("session_created", {"game": kind, "user": self.user_id, "session": self.session_id, "seed": seed})
        return self.controller

    def _history(self, kind: str) -> List[SessionRecord]:
        try:
            return self.store.load_history(self.user_id, kind)
        except PersistenceFailure as exc:
            trace_error("history_unavailable", exc, game=kind)
            return []

    def finish_session(self) -> SessionOutcome:
        """Summarise the finished session, save it and dispatch feedback.

        Persistence and feedback failures never escape: the record is still
        returned and the feedback ticket always yields some text.
        """
        ctl = self.controller
        assert ctl is not None and self.constants is not None, "start_session() first"
        if self.outcome is not None:
            return self.outcome
        ctl.quit()
        record = summarize(
            ctl.state,
            game_kind=ctl.kind,
            difficulty_tag=self.constants.difficulty_tag,
            time_spent_seconds=ctl.time_spent_seconds(),
            user_id=self.user_id,
            session_id=self.session_id,
            end_reason=ctl.end_reason,
        )
        prior = self._history(ctl.kind)
        saved = True
        try:
            self.store.save(record)
        except PersistenceFailure as exc:
            saved = False
            trace_error("save_failed", exc, session=record.session_id)
        history = [r for r in prior if r.session_id != record.session_id] + [record]
        stats = history_stats(history)
        ticket = self.dispatcher.dispatch(record, prior)
        summary = format_summary(record, stats)
        self.outcome = SessionOutcome(
            record=record,
            stats=stats,
            summary=summary,
            feedback=ticket,
            tips=recommendations(record),
            saved=saved,
        )
        xtrace("session_summarized", {"session": record.session_id, "score": record.final_score, "saved": saved})
        return self.outcome
