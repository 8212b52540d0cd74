from __future__ import annotations

"""Progression controller: the per-session state machine.

idle -> instructions -> playing -> {showing, inputting}* -> paused <-> ... -> finished

The controller owns the SessionState, asks the game for challenges, scores
correct answers, takes lives for misses, levels up, and ends the session on
lives, countdown, rounds, quit or a content generation failure. Transitions
are published on the EventBus; nothing here renders or plays anything.
"""

import threading
import time
from typing import Any, Callable, Optional

from ..app import explain
from ..app.events import EventBus
from ..app.game_registry import make_game
from ..app.presets import GAME_PRESETS, GameConstants
from ..errors import ContentGenerationError
from ..results.schema import (
    AnswerEvent,
    Challenge,
    FINISHED,
    IDLE,
    INPUTTING,
    INSTRUCTIONS,
    PAUSED,
    PLAYING,
    SHOWING,
    SessionState,
)
from ..scoring.scoring import score_points
from ..util.randomness import make_rng


ACTIVE_STATES = (PLAYING, SHOWING, INPUTTING)
INPUT_STATES = (PLAYING, INPUTTING)


class RepeatingTimer:
    """Chain of daemon threading.Timer calls firing `callback(generation)`."""

    def __init__(self, interval_s: float, callback: Callable[[int], None], generation: int) -> None:
        self.interval_s = float(interval_s)
        self.callback = callback
        self.generation = generation
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._cancelled = False

    def _arm(self) -> None:
        self._timer = threading.Timer(self.interval_s, self._fire)
        self._timer.daemon = True
        self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            if self._cancelled:
                return
        self.callback(self.generation)
        with self._lock:
            if not self._cancelled:
                self._arm()

    def start(self) -> None:
        with self._lock:
            if not self._cancelled:
                self._arm()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer:
                self._timer.cancel()
                self._timer = None


TimerFactory = Callable[[float, Callable[[int], None], int], Any]


class GameController:
    def __init__(
        self,
        kind: str,
        constants: Optional[GameConstants] = None,
        *,
        rng=None,
        bus: Optional[EventBus] = None,
        timer_factory: Optional[TimerFactory] = None,
        tick_ms: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.kind = kind
        self.consts = constants or GAME_PRESETS[kind]
        self.game = make_game(kind, self.consts)
        self.rng = rng or make_rng()
        self.bus = bus or EventBus()
        self.timer_factory: TimerFactory = timer_factory or RepeatingTimer
        self.tick_ms = int(tick_ms)
        self.clock = clock
        self.state = SessionState(lives=self.consts.starting_lives)
        self.challenge: Optional[Challenge] = None
        self.end_reason: Optional[str] = None
        self.finished = threading.Event()
        self._lock = threading.RLock()
        self._generation = 0
        self._timer: Any = None
        self._paused_from: Optional[str] = None
        self._hint_shown = False
        self._correct_total = 0
        self._input_since: Optional[float] = None
        self._pause_since: Optional[float] = None
        self._play_started: Optional[float] = None
        self._paused_total = 0.0
        self._play_ended: Optional[float] = None

    # ---- read-only helpers ----
    @property
    def generation(self) -> int:
        return self._generation

    @property
    def awaiting_input(self) -> bool:
        return self.state.state in INPUT_STATES and self.challenge is not None

    def time_spent_seconds(self) -> int:
        if self._play_started is None:
            return 0
        end = self._play_ended if self._play_ended is not None else self.clock()
        paused = self._paused_total
        if self._pause_since is not None and self._play_ended is None:
            paused += end - self._pause_since
        return max(0, int(round(end - self._play_started - paused)))

    # ---- internal ----
    def _set_state(self, new_state: str) -> None:
        old = self.state.state
        self.state.state = new_state
        self.bus.emit("state_changed", {"from": old, "to": new_state})

    def _start_timer(self) -> None:
        if not self.consts.timed:
            return
        self._generation += 1
        self._timer = self.timer_factory(self.tick_ms / 1000.0, self._on_timer, self._generation)
        self._timer.start()

    def _stop_timer(self) -> None:
        # bump first so any tick already in flight is stale
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self, generation: int) -> None:
        self.tick(self.tick_ms, generation)

    def _next_challenge(self) -> bool:
        try:
            challenge = self.game.generate(self.state.level, self.rng)
        except ContentGenerationError as exc:
            explain.trace_error("generation_failed", exc, game=self.kind, level=self.state.level)
            self._finish("generation_failed")
            return False
        self.challenge = challenge
        self._hint_shown = False
        if self.consts.shows_stimulus:
            self._input_since = None
            self._set_state(SHOWING)
        else:
            self._input_since = self.clock()
            self._set_state(PLAYING)
        self.bus.emit("challenge_ready", challenge)
        return True

    def _finish(self, reason: str) -> None:
        if self.state.state == FINISHED:
            return
        self._stop_timer()
        now = self.clock()
        if self._pause_since is not None:
            self._paused_total += now - self._pause_since
            self._pause_since = None
        self._play_ended = now
        self.challenge = None
        self.end_reason = reason
        self._set_state(FINISHED)
        explain.trace("session_finished", {"game": self.kind, "reason": reason, "score": self.state.score, "level": self.state.level})
        self.bus.emit("finished", {"reason": reason, "state": self.state})
        self.finished.set()

    def _levels_up(self) -> bool:
        threshold = max(1, int(self.consts.level_up_threshold))
        if self.consts.level_up_rule == "correct_total":
            counter = self._correct_total
        else:
            counter = self.state.streak
        return counter > 0 and counter % threshold == 0 and self.state.level < self.consts.max_level

    def _measured_response_ms(self) -> int:
        if self._input_since is None:
            return 0
        return max(0, int((self.clock() - self._input_since) * 1000))

    # ---- transitions ----
    def request_start(self) -> bool:
        with self._lock:
            if self.state.state not in (IDLE, FINISHED):
                return False
            self._set_state(INSTRUCTIONS)
            return True

    def confirm(self) -> bool:
        with self._lock:
            if self.state.state != INSTRUCTIONS:
                return False
            c = self.consts
            self.state = SessionState(
                state=INSTRUCTIONS,
                lives=c.starting_lives,
                time_remaining_ms=c.time_limit_s * 1000 if c.timed else None,
                total_rounds=c.total_rounds,
            )
            self.challenge = None
            self.end_reason = None
            self.finished.clear()
            self._correct_total = 0
            self._paused_total = 0.0
            self._pause_since = None
            self._play_ended = None
            self._play_started = self.clock()
            self.game.reset()
            explain.trace("session_started", {"game": self.kind, "lives": c.starting_lives, "time_limit_s": c.time_limit_s, "rounds": c.total_rounds})
            if not self._next_challenge():
                return False
            self._start_timer()
            return True

    def stimulus_shown(self) -> bool:
        with self._lock:
            if self.state.state != SHOWING:
                return False
            self._input_since = self.clock()
            self._set_state(INPUTTING)
            return True

    def submit_answer(self, response: Any, response_time_ms: Optional[int] = None) -> Optional[AnswerEvent]:
        """Judge `response` for the pending challenge; None when nothing is pending."""
        with self._lock:
            if not self.awaiting_input:
                return None
            challenge = self.challenge
            assert challenge is not None
            correct = self.game.evaluate(challenge, response)
            rt = self._measured_response_ms() if response_time_ms is None else max(0, int(response_time_ms))
            st = self.state
            points = 0
            if correct:
                seconds_left = st.time_remaining_ms / 1000.0 if st.time_remaining_ms is not None else None
                points = score_points(
                    st.level,
                    st.streak,
                    self.consts,
                    seconds_remaining=seconds_left,
                    response_time_ms=rt,
                    hint_used=self._hint_shown,
                )
                st.score += points
                st.streak += 1
                st.best_streak = max(st.best_streak, st.streak)
                self._correct_total += 1
                self.game.accept(challenge, response)
            else:
                st.lives = max(0, st.lives - 1)
                st.streak = 0

            event = AnswerEvent(
                challenge=challenge,
                correct=correct,
                response_time_ms=rt,
                hint_used=self._hint_shown,
                points=points,
                level=st.level,
                streak=st.streak,
            )
            st.events.append(event)
            self.challenge = None
            self.bus.emit("answer_evaluated", event)

            if correct and self._levels_up():
                st.level += 1
                self.bus.emit("level_up", {"level": st.level})
                explain.trace("level_up", {"game": self.kind, "level": st.level})
            if not correct:
                self.bus.emit("life_lost", {"lives": st.lives})
                if st.lives == 0:
                    self._finish("out_of_lives")
                    return event

            if st.total_rounds is not None:
                st.round_index += 1
                if st.round_index >= st.total_rounds:
                    self._finish("rounds_complete")
                    return event

            self._next_challenge()
            return event

    def use_hint(self) -> Optional[str]:
        with self._lock:
            if self.state.state not in ACTIVE_STATES or self.challenge is None or not self.challenge.hint:
                return None
            if not self._hint_shown:
                self._hint_shown = True
                self.state.hints_used += 1
            return self.challenge.hint

    def pause(self) -> bool:
        with self._lock:
            if self.state.state not in ACTIVE_STATES:
                return False
            self._stop_timer()
            self._paused_from = self.state.state
            self._pause_since = self.clock()
            self._set_state(PAUSED)
            return True

    def resume(self) -> bool:
        with self._lock:
            if self.state.state != PAUSED:
                return False
            now = self.clock()
            if self._pause_since is not None:
                paused_for = now - self._pause_since
                self._paused_total += paused_for
                if self._input_since is not None:
                    self._input_since += paused_for
                self._pause_since = None
            self._set_state(self._paused_from or PLAYING)
            self._paused_from = None
            self._start_timer()
            return True

    def toggle_pause(self) -> bool:
        with self._lock:
            if self.state.state == PAUSED:
                return self.resume()
            return self.pause()

    def tick(self, elapsed_ms: int, generation: Optional[int] = None) -> None:
        """Advance the countdown; ticks from a cancelled timer are ignored."""
        with self._lock:
            if generation is not None and generation != self._generation:
                return
            if self.state.state not in ACTIVE_STATES or self.state.time_remaining_ms is None:
                return
            remaining = max(0, self.state.time_remaining_ms - max(0, int(elapsed_ms)))
            self.state.time_remaining_ms = remaining
            self.bus.emit("tick", {"time_remaining_ms": remaining})
            if remaining == 0:
                self._finish("time_up")

    def quit(self) -> bool:
        with self._lock:
            if self.state.state in (IDLE, FINISHED):
                return False
            self._finish("quit")
            return True
