from __future__ import annotations

"""Shape sorter: pick the target shape out of a set of look-alikes."""

import itertools
import random
from typing import Any, List, Mapping, Tuple

from .base_game import BaseGame, pick_options
from ..errors import InvalidResponseShape
from ..results.schema import Challenge


Shape = Tuple[str, str, str]  # (type, color, size)

SHAPES_PER_LEVEL = {1: 4, 2: 6, 3: 8, 4: 10, 5: 12}

TYPE_TIERS = [(1, ("circle", "square")), (2, ("triangle",)), (3, ("diamond",)), (4, ("star",)), (5, ("hexagon",))]
COLOR_TIERS = [(1, ("red", "blue", "green")), (2, ("yellow",)), (3, ("purple", "orange")), (4, ("pink", "cyan"))]
SIZE_TIERS = [(1, ("medium",)), (3, ("small",)), (5, ("large",))]


def _unlocked(tiers, level: int) -> List[str]:
    out: List[str] = []
    for first, values in tiers:
        if level >= first:
            out.extend(values)
    return out


def shape_count(level: int) -> int:
    return SHAPES_PER_LEVEL.get(min(level, 5), 12)


def shape_domain(level: int) -> List[Shape]:
    return list(itertools.product(_unlocked(TYPE_TIERS, level), _unlocked(COLOR_TIERS, level), _unlocked(SIZE_TIERS, level)))


def describe(shape: Shape) -> str:
    kind, color, size = shape
    size_text = "" if size == "medium" else size
    return " ".join(p for p in (size_text, color, kind) if p)


def _as_shape(value: Any) -> Shape:
    if isinstance(value, Mapping):
        try:
            value = (value["type"], value["color"], value["size"])
        except KeyError as exc:
            raise InvalidResponseShape(f"shape missing {exc}") from exc
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)) or len(value) != 3:
        raise InvalidResponseShape("a shape is (type, color, size)")
    if not all(isinstance(v, str) for v in value):
        raise InvalidResponseShape("shape attributes are text")
    return (value[0].lower(), value[1].lower(), value[2].lower())


class ShapeSorterGame(BaseGame):
    kind = "shape_sorter"

    def __init__(self, option_count: int | None = None) -> None:
        self.option_count = option_count

    def _count(self, level: int) -> int:
        return int(self.option_count) if self.option_count else shape_count(level)

    def generate(self, level: int, rng: random.Random) -> Challenge:
        domain = shape_domain(level)
        target = rng.choice(domain)
        shapes = pick_options(target, domain, self._count(level), rng)
        return Challenge(
            kind=self.kind,
            level=level,
            content={"target": {"type": target[0], "color": target[1], "size": target[2]}},
            answer=target,
            options=shapes,
            hint=f"Look for the {describe(target)}.",
        )

    def check(self, challenge: Challenge, response: Any) -> bool:
        return _as_shape(response) == challenge.answer

    def difficulty(self, level: int) -> Tuple[float, ...]:
        return (float(self._count(level)), float(len(shape_domain(level))))
