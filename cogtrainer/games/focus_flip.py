from __future__ import annotations

"""Focus flip: memorise a board of face-down pairs, then find a card's twin."""

import random
from typing import Any, List, Tuple

from .base_game import BaseGame, as_int
from ..errors import ContentGenerationError
from ..results.schema import Challenge


INITIAL_CARDS = 8
MAX_CARDS = 16
CARDS_PER_LEVEL = 2

CARD_SYMBOLS = [
    "star", "balloon", "target", "palette", "tent", "mask", "guitar", "trumpet",
    "rainbow", "blossom", "hibiscus", "sunflower", "tulip", "rose", "daisy", "herb",
    "apple", "orange", "lemon", "banana", "grapes", "strawberry", "cherry", "peach",
    "comet", "gem", "flame", "sparkle", "glitter", "moon", "sun", "globe",
]


def card_count(level: int) -> int:
    return min(INITIAL_CARDS + (level - 1) * CARDS_PER_LEVEL, MAX_CARDS)


def build_board(count: int, rng: random.Random) -> List[str]:
    """Shuffled board of `count // 2` symbol pairs."""
    pairs = count // 2
    if pairs < 1 or pairs > len(CARD_SYMBOLS):
        raise ContentGenerationError(f"cannot lay out {pairs} pairs from {len(CARD_SYMBOLS)} symbols")
    symbols = rng.sample(CARD_SYMBOLS, pairs)
    board = symbols + symbols
    rng.shuffle(board)
    return board


class FocusFlipGame(BaseGame):
    kind = "focus_flip"

    def __init__(self, option_count: int | None = None) -> None:
        # Optional fixed board size, otherwise it grows with level
        self.board_size = option_count

    def _count(self, level: int) -> int:
        return int(self.board_size) if self.board_size else card_count(level)

    def generate(self, level: int, rng: random.Random) -> Challenge:
        board = build_board(self._count(level), rng)
        target = rng.randrange(len(board))
        partner = next(i for i, s in enumerate(board) if s == board[target] and i != target)
        row = partner // 4 + 1
        return Challenge(
            kind=self.kind,
            level=level,
            content={"board": tuple(board), "target": target},
            answer=partner,
            hint=f"The match is in row {row}.",
        )

    def check(self, challenge: Challenge, response: Any) -> bool:
        return as_int(response) == challenge.answer

    def difficulty(self, level: int) -> Tuple[float, ...]:
        return (float(self._count(level)),)
