from __future__ import annotations

"""Color trap: name the ink colour of a colour word (Stroop effect)."""

import random
from typing import Any, List, Tuple

from .base_game import BaseGame, as_text, pick_options
from ..results.schema import Challenge


# Colour pool grows by level tier; earlier colours are never removed.
COLOR_TIERS: List[Tuple[int, Tuple[str, ...]]] = [
    (1, ("red", "blue", "green", "yellow")),
    (3, ("purple", "orange")),
    (5, ("pink", "cyan")),
]


def colors_for_level(level: int) -> List[str]:
    pool: List[str] = []
    for min_level, colors in COLOR_TIERS:
        if level >= min_level:
            pool.extend(colors)
    return pool


def incongruent_probability(level: int) -> float:
    """Chance that word and ink differ; rises with level, capped at 0.8."""
    congruent = max(0.5 - level * 0.05, 0.2)
    return round(1.0 - congruent, 4)


class ColorTrapGame(BaseGame):
    kind = "color_trap"

    def __init__(self, option_count: int = 4) -> None:
        self.option_count = int(option_count)

    def generate(self, level: int, rng: random.Random) -> Challenge:
        pool = colors_for_level(level)
        word = rng.choice(pool)
        if rng.random() < incongruent_probability(level):
            ink = rng.choice([c for c in pool if c != word])
        else:
            ink = word
        options = pick_options(ink, pool, self.option_count, rng)
        return Challenge(
            kind=self.kind,
            level=level,
            content={"word": word.upper(), "ink": ink, "congruent": ink == word},
            answer=ink,
            options=options,
            hint="Name the colour of the ink, not the word you read.",
        )

    def check(self, challenge: Challenge, response: Any) -> bool:
        return as_text(response) == challenge.answer

    def difficulty(self, level: int) -> Tuple[float, ...]:
        return (float(len(colors_for_level(level))), incongruent_probability(level))
