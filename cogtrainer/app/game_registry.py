from __future__ import annotations

"""Game registry and metadata.

Expose game metadata, construct game instances via a simple factory and
offer the `generate`/`evaluate` entry points used by the controller.
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from ..games.base_game import BaseGame
from ..games.color_trap import ColorTrapGame
from ..games.dot_dash import DotDashGame
from ..games.focus_flip import FocusFlipGame
from ..games.math_master import MathMasterGame
from ..games.reaction_time import ReactionTimeGame
from ..games.sequence_sense import SequenceSenseGame
from ..games.shape_sorter import ShapeSorterGame
from ..games.word_chain import WordChainGame
from ..results.schema import Challenge
from ..util.randomness import make_rng
from .presets import GAME_PRESETS, GameConstants


@dataclass(frozen=True)
class GameMeta:
    id: str
    name: str
    description: str
    skill: str
    constants: GameConstants


_GAMES: Dict[str, Type[BaseGame]] = {
    "focus_flip": FocusFlipGame,
    "color_trap": ColorTrapGame,
    "dot_dash": DotDashGame,
    "sequence_sense": SequenceSenseGame,
    "shape_sorter": ShapeSorterGame,
    "word_chain": WordChainGame,
    "reaction_time": ReactionTimeGame,
    "math_master": MathMasterGame,
}

_SIZED = ("color_trap", "shape_sorter", "focus_flip")

_DESCRIPTIONS = {
    "focus_flip": ("Focus Flip", "Remember where each card sits and find its matching pair.", "memory"),
    "color_trap": ("Color Trap", "Name the ink colour, not the colour word you read.", "focus and attention"),
    "dot_dash": ("Dot Dash", "Watch a dot-dash pattern and repeat it in order.", "pattern memory"),
    "sequence_sense": ("Sequence Sense", "Find the next number in the sequence.", "logical thinking"),
    "shape_sorter": ("Shape Sorter", "Pick the target shape out of the look-alikes.", "visual processing"),
    "word_chain": ("Word Chain", "Keep the chain going: each word starts with the last letter of the one before.", "vocabulary and creative thinking"),
    "reaction_time": ("Reaction Time", "React as soon as the signal appears.", "processing speed"),
    "math_master": ("Math Master", "Solve arithmetic problems against the clock.", "mental math"),
}


def list_games() -> List[GameMeta]:
    out = []
    for gid in _GAMES:
        name, desc, skill = _DESCRIPTIONS[gid]
        out.append(GameMeta(id=gid, name=name, description=desc, skill=skill, constants=GAME_PRESETS[gid]))
    return out


def get_game(kind: str) -> GameMeta:
    for m in list_games():
        if m.id == kind:
            return m
    raise KeyError(f"Unknown game id: {kind}")


def make_game(kind: str, constants: Optional[GameConstants] = None) -> BaseGame:
    """Factory that builds the concrete game, sized by its constants."""
    if kind not in _GAMES:
        raise KeyError(f"Unsupported game for factory: {kind}")
    consts = constants or GAME_PRESETS[kind]
    cls = _GAMES[kind]
    # only these games take a size; the rest build from level alone
    if kind in _SIZED and consts.option_count is not None:
        return cls(int(consts.option_count))
    return cls()


def generate(kind: str, level: int, rng: random.Random | None = None) -> Challenge:
    """One challenge for `kind` at `level`; raises ContentGenerationError."""
    return make_game(kind).generate(max(1, int(level)), rng or make_rng())


def evaluate(challenge: Challenge, response: Any) -> bool:
    if challenge.kind not in _GAMES:
        return False
    return make_game(challenge.kind).evaluate(challenge, response)
