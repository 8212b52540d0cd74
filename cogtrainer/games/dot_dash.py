from __future__ import annotations

"""Dot dash: watch a morse-like pattern, then repeat it in order."""

import random
from typing import Any, List, Tuple

from .base_game import BaseGame, as_sequence, scaled_length
from ..errors import InvalidResponseShape
from ..results.schema import Challenge


DOT = "dot"
DASH = "dash"

INITIAL_PATTERN_LENGTH = 3
LENGTH_STEP_LEVELS = 2
MAX_PATTERN_LENGTH = 8

_ALIASES = {".": DOT, "dot": DOT, "•": DOT, "-": DASH, "dash": DASH, "—": DASH}


def pattern_length(level: int) -> int:
    return scaled_length(level, INITIAL_PATTERN_LENGTH, LENGTH_STEP_LEVELS, MAX_PATTERN_LENGTH)


def pattern_to_morse(pattern: List[str]) -> str:
    return " ".join("•" if s == DOT else "—" for s in pattern)


def _symbol(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidResponseShape(f"pattern symbols are text, got {type(value).__name__}")
    sym = _ALIASES.get(value.strip().lower())
    if sym is None:
        raise InvalidResponseShape(f"unknown symbol: {value!r}")
    return sym


class DotDashGame(BaseGame):
    kind = "dot_dash"

    def generate(self, level: int, rng: random.Random) -> Challenge:
        pattern = [DOT if rng.random() < 0.5 else DASH for _ in range(pattern_length(level))]
        return Challenge(
            kind=self.kind,
            level=level,
            content={"pattern": tuple(pattern), "morse": pattern_to_morse(pattern)},
            answer=tuple(pattern),
            hint=f"The pattern starts with a {pattern[0]}",
        )

    def check(self, challenge: Challenge, response: Any) -> bool:
        given = as_sequence(response)
        if len(given) != len(challenge.answer):
            return False
        return all(_symbol(g) == truth for g, truth in zip(given, challenge.answer))

    def difficulty(self, level: int) -> Tuple[float, ...]:
        return (float(pattern_length(level)),)
