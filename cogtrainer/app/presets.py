from __future__ import annotations

"""Per-game tuning constants.

Each game kind gets one GameConstants instance; scoring, levelling and
session length all read from it, so games differ only in these numbers.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Tuple


TIME_MODES = ("countdown", "latency", "none")
LEVEL_UP_RULES = ("streak", "correct_total")


@dataclass(frozen=True)
class GameConstants:
    base_points: int = 10
    level_step: float = 0.2
    streak_divisor: int = 3
    streak_unit: int = 2
    time_mode: str = "countdown"
    time_rate: float = 1.0
    # (threshold_ms, bonus) pairs, ascending thresholds
    latency_tiers: Tuple[Tuple[int, int], ...] = ()
    hint_penalty_factor: float = 1.0
    starting_lives: int = 3
    time_limit_s: Optional[int] = None
    total_rounds: Optional[int] = None
    level_up_threshold: int = 5
    level_up_rule: str = "streak"
    max_level: int = 10
    option_count: Optional[int] = None
    shows_stimulus: bool = False
    difficulty_tag: str = "adaptive"

    @property
    def timed(self) -> bool:
        return self.time_limit_s is not None


GAME_PRESETS: Dict[str, GameConstants] = {
    "focus_flip": GameConstants(
        base_points=100,
        level_step=0.2,
        streak_divisor=3,
        streak_unit=10,
        time_mode="countdown",
        time_rate=2.0,
        time_limit_s=60,
        level_up_threshold=5,
        level_up_rule="streak",
        max_level=5,
        shows_stimulus=True,
        difficulty_tag="memory",
    ),
    "color_trap": GameConstants(
        base_points=10,
        level_step=0.2,
        streak_divisor=3,
        streak_unit=2,
        time_mode="countdown",
        time_rate=1.0,
        time_limit_s=30,
        level_up_threshold=5,
        level_up_rule="correct_total",
        max_level=10,
        option_count=4,
        difficulty_tag="attention",
    ),
    "dot_dash": GameConstants(
        base_points=50,
        level_step=0.5,
        streak_divisor=3,
        streak_unit=25,
        time_mode="none",
        total_rounds=10,
        level_up_threshold=3,
        level_up_rule="streak",
        max_level=10,
        shows_stimulus=True,
        difficulty_tag="memory",
    ),
    "sequence_sense": GameConstants(
        base_points=20,
        level_step=0.2,
        streak_divisor=3,
        streak_unit=5,
        time_mode="countdown",
        time_rate=0.5,
        hint_penalty_factor=0.5,
        time_limit_s=90,
        level_up_threshold=3,
        level_up_rule="streak",
        max_level=8,
        difficulty_tag="reasoning",
    ),
    "shape_sorter": GameConstants(
        base_points=15,
        level_step=0.3,
        streak_divisor=3,
        streak_unit=3,
        time_mode="countdown",
        time_rate=0.5,
        time_limit_s=60,
        level_up_threshold=5,
        level_up_rule="correct_total",
        max_level=5,
        difficulty_tag="visual",
    ),
    "word_chain": GameConstants(
        base_points=100,
        level_step=0.1,
        streak_divisor=2,
        streak_unit=10,
        time_mode="countdown",
        time_rate=2.0,
        hint_penalty_factor=0.5,
        time_limit_s=90,
        level_up_threshold=10,
        level_up_rule="correct_total",
        max_level=5,
        difficulty_tag="language",
    ),
    "reaction_time": GameConstants(
        base_points=10,
        level_step=0.1,
        streak_divisor=3,
        streak_unit=5,
        time_mode="latency",
        latency_tiers=((200, 50), (500, 20)),
        total_rounds=10,
        level_up_threshold=3,
        level_up_rule="streak",
        max_level=12,
        difficulty_tag="speed",
    ),
    "math_master": GameConstants(
        base_points=10,
        level_step=0.1,
        streak_divisor=5,
        streak_unit=10,
        time_mode="latency",
        latency_tiers=((2000, 100), (3000, 50)),
        time_limit_s=60,
        level_up_threshold=10,
        level_up_rule="correct_total",
        max_level=10,
        difficulty_tag="arithmetic",
    ),
}


def _coerce(name: str, value: Any) -> Any:
    if name == "latency_tiers":
        return tuple((int(t), int(b)) for t, b in value)
    return value


def _problem(name: str, value: Any) -> Optional[str]:
    """Why `value` is unusable for field `name`, or None when it is fine."""
    if name == "time_mode" and value not in TIME_MODES:
        return f"must be one of {', '.join(TIME_MODES)}"
    if name == "level_up_rule" and value not in LEVEL_UP_RULES:
        return f"must be one of {', '.join(LEVEL_UP_RULES)}"
    if name in ("starting_lives", "level_up_threshold", "max_level", "base_points", "streak_divisor"):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            return "must be an integer >= 1"
    if name == "hint_penalty_factor":
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 < value <= 1:
            return "must be in (0, 1]"
    if name in ("time_limit_s", "total_rounds", "option_count") and value is not None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            return "must be empty or an integer >= 1"
    return None


def constants_for(kind: str, overrides: Dict[str, Any] | None = None) -> GameConstants:
    """Preset for `kind` with config overrides applied.

    Unknown keys are ignored. A value of the wrong type or out of range is
    reported with a warning and the preset value is kept.
    """
    if kind not in GAME_PRESETS:
        raise KeyError(f"Unknown game kind: {kind}")
    base = GAME_PRESETS[kind]
    if not overrides:
        return base
    known = {f.name for f in fields(GameConstants)}
    changes: Dict[str, Any] = {}
    for name, raw in overrides.items():
        if name not in known:
            continue
        try:
            value = _coerce(name, raw)
        except (TypeError, ValueError):
            print(f"WARNING: {kind}.{name}={raw!r} is malformed; keeping {getattr(base, name)!r}")
            continue
        problem = _problem(name, value)
        if problem:
            print(f"WARNING: {kind}.{name}={raw!r} {problem}; keeping {getattr(base, name)!r}")
            continue
        changes[name] = value
    ignored = sorted(set(overrides) - known)
    if ignored:
        print(f"WARNING: unknown constants for {kind} ignored: {', '.join(ignored)}")
    return replace(base, **changes)
