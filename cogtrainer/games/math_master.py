from __future__ import annotations

"""Math master: solve a mental arithmetic problem.

Operators unlock one per level (+, then -, then x, then /) and are never
taken away; operand ranges widen with level. Subtraction never goes
negative and division always has an exact integer quotient.
"""

import random
from typing import Any, Tuple

from .base_game import BaseGame, as_int
from ..results.schema import Challenge


OPERATOR_ORDER = ("+", "-", "*", "/")
SYMBOLS = {"+": "+", "-": "-", "*": "×", "/": "÷"}

ADD_RANGES = {1: 20, 2: 50, 3: 100}


def operators_for_level(level: int) -> Tuple[str, ...]:
    return OPERATOR_ORDER[: max(1, min(level, len(OPERATOR_ORDER)))]


def add_range(level: int) -> int:
    if level in ADD_RANGES:
        return ADD_RANGES[level]
    return 200 + 50 * (level - 4)


def mul_range(level: int) -> int:
    return min(10 + 5 * max(level - 3, 0), 25)


def quotient_range(level: int) -> int:
    return min(20 + 10 * max(level - 4, 0), 50)


def make_problem(level: int, rng: random.Random) -> Tuple[int, str, int, int]:
    """Return (a, op, b, answer) for one problem at `level`."""
    op = rng.choice(operators_for_level(level))
    if op == "*":
        a, b = rng.randint(1, mul_range(level)), rng.randint(1, mul_range(level))
        return a, op, b, a * b
    if op == "/":
        answer = rng.randint(1, quotient_range(level))
        b = rng.randint(1, mul_range(level))
        return answer * b, op, b, answer
    hi = add_range(level)
    a, b = rng.randint(1, hi), rng.randint(1, hi)
    if op == "-":
        if b > a:
            a, b = b, a
        return a, op, b, a - b
    return a, op, b, a + b


class MathMasterGame(BaseGame):
    kind = "math_master"

    def generate(self, level: int, rng: random.Random) -> Challenge:
        a, op, b, answer = make_problem(level, rng)
        return Challenge(
            kind=self.kind,
            level=level,
            content={"question": f"{a} {SYMBOLS[op]} {b}", "a": a, "b": b, "operator": op},
            answer=answer,
            hint=f"The answer is between {answer - answer % 10} and {answer - answer % 10 + 10}.",
        )

    def check(self, challenge: Challenge, response: Any) -> bool:
        return as_int(response) == challenge.answer

    def difficulty(self, level: int) -> Tuple[float, ...]:
        return (float(add_range(level)), float(len(operators_for_level(level))), float(mul_range(level)))
