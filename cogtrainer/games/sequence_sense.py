from __future__ import annotations

"""Sequence sense: predict the next number of a pattern.

Sequence families unlock by level (arithmetic first, then geometric,
squares, fibonacci-like, primes, mixed patterns) and the number of shown
terms grows slowly, so a higher level never offers an easier pool.
"""

import random
from typing import Any, Callable, Dict, List, Tuple

from .base_game import BaseGame, as_int, scaled_length
from ..results.schema import Challenge


ARITHMETIC = "arithmetic"
GEOMETRIC = "geometric"
SQUARE = "square"
FIBONACCI = "fibonacci"
PRIME = "prime"
CUSTOM = "custom"

# (family, first level it appears at)
FAMILY_UNLOCKS: List[Tuple[str, int]] = [
    (ARITHMETIC, 1),
    (GEOMETRIC, 2),
    (SQUARE, 3),
    (FIBONACCI, 4),
    (PRIME, 5),
    (CUSTOM, 6),
]

PRIMES = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59]


def families_for_level(level: int) -> List[str]:
    return [fam for fam, first in FAMILY_UNLOCKS if level >= first]


def shown_terms(level: int) -> int:
    return scaled_length(level, 4, 3, 7)


def max_step(level: int) -> int:
    return 5 if level <= 2 else 10


def _arithmetic(n: int, level: int, rng: random.Random) -> Tuple[List[int], str]:
    start = rng.randint(1, 20)
    step = rng.randint(1, max_step(level))
    if level >= 3 and rng.random() < 0.3:
        step = -step
    terms = [start + i * step for i in range(n + 1)]
    hint = f"Add {step} each time" if step > 0 else f"Subtract {abs(step)} each time"
    return terms, hint


def _geometric(n: int, level: int, rng: random.Random) -> Tuple[List[int], str]:
    start = rng.randint(1, 5)
    ratio = 2 if level <= 3 else rng.randint(2, 4)
    return [start * ratio ** i for i in range(n + 1)], f"Multiply by {ratio} each time"


def _square(n: int, level: int, rng: random.Random) -> Tuple[List[int], str]:
    start = rng.randint(1, 3)
    return [(start + i) ** 2 for i in range(n + 1)], "Each number is a perfect square"


def _fibonacci(n: int, level: int, rng: random.Random) -> Tuple[List[int], str]:
    terms = [rng.randint(1, 3), rng.randint(1, 3)]
    while len(terms) < n + 1:
        terms.append(terms[-1] + terms[-2])
    return terms, "Each number is the sum of the two previous numbers"


def _prime(n: int, level: int, rng: random.Random) -> Tuple[List[int], str]:
    start = rng.randint(0, 2)
    return PRIMES[start:start + n + 1], "These are prime numbers (only divisible by 1 and themselves)"


def _custom(n: int, level: int, rng: random.Random) -> Tuple[List[int], str]:
    if rng.random() < 0.5:
        add = rng.randint(2, 6)
        sub = rng.randint(1, 3)
        terms = [rng.randint(1, 10)]
        for i in range(1, n + 1):
            terms.append(terms[-1] + add if i % 2 == 1 else terms[-1] - sub)
        return terms, f"Alternating pattern: add {add}, subtract {sub}"
    base = rng.randint(2, 3)
    return [base ** i for i in range(1, n + 2)], f"Powers of {base}"


_BUILDERS: Dict[str, Callable[[int, int, random.Random], Tuple[List[int], str]]] = {
    ARITHMETIC: _arithmetic,
    GEOMETRIC: _geometric,
    SQUARE: _square,
    FIBONACCI: _fibonacci,
    PRIME: _prime,
    CUSTOM: _custom,
}


class SequenceSenseGame(BaseGame):
    kind = "sequence_sense"

    def generate(self, level: int, rng: random.Random) -> Challenge:
        family = rng.choice(families_for_level(level))
        n = shown_terms(level)
        terms, hint = _BUILDERS[family](n, level, rng)
        return Challenge(
            kind=self.kind,
            level=level,
            content={"sequence": tuple(terms[:n]), "family": family},
            answer=terms[n],
            hint=hint,
        )

    def check(self, challenge: Challenge, response: Any) -> bool:
        return as_int(response) == challenge.answer

    def difficulty(self, level: int) -> Tuple[float, ...]:
        return (float(len(families_for_level(level))), float(shown_terms(level)), float(max_step(level)))
