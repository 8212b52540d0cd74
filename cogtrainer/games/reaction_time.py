from __future__ import annotations

"""Reaction time: respond as soon as the signal appears.

The response is the measured latency in milliseconds; it counts as correct
when it falls inside the level's response window. Negative latencies
(jumping the gun) are malformed and therefore wrong.
"""

import random
from typing import Any, Tuple

from .base_game import BaseGame, as_int
from ..errors import InvalidResponseShape
from ..results.schema import Challenge


BASE_WINDOW_MS = 1500
WINDOW_STEP_MS = 100
MIN_WINDOW_MS = 400
MIN_DELAY_MS = 1000
MAX_DELAY_MS = 3000


def response_window_ms(level: int) -> int:
    return max(BASE_WINDOW_MS - WINDOW_STEP_MS * (level - 1), MIN_WINDOW_MS)


class ReactionTimeGame(BaseGame):
    kind = "reaction_time"

    def generate(self, level: int, rng: random.Random) -> Challenge:
        window = response_window_ms(level)
        return Challenge(
            kind=self.kind,
            level=level,
            content={"delay_ms": rng.randint(MIN_DELAY_MS, MAX_DELAY_MS), "window_ms": window},
            answer=window,
            hint="Wait for the signal, then react as fast as you can.",
        )

    def check(self, challenge: Challenge, response: Any) -> bool:
        latency = as_int(response)
        if latency < 0:
            raise InvalidResponseShape("latency cannot be negative")
        return latency <= challenge.answer

    def difficulty(self, level: int) -> Tuple[float, ...]:
        # a narrower window is harder
        return (float(BASE_WINDOW_MS - response_window_ms(level)),)
