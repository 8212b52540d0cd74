from __future__ import annotations

"""Scoring for one correct answer.

points = floor(base * level_multiplier + streak_bonus + time_bonus), at
least 1; a used hint then scales the result by the hint penalty factor,
and the result is clamped to 1 again.
"""

import math
from typing import Optional

from ..app.presets import GameConstants


def level_multiplier(level: int, level_step: float) -> float:
    return 1.0 + (max(1, int(level)) - 1) * float(level_step)


def streak_bonus(streak: int, divisor: int, unit: int) -> int:
    if divisor <= 0 or streak < divisor:
        return 0
    return (int(streak) // int(divisor)) * int(unit)


def time_bonus(consts: GameConstants, seconds_remaining: Optional[float] = None, response_time_ms: Optional[int] = None) -> int:
    """Countdown games reward remaining time, latency games fast answers."""
    if consts.time_mode == "countdown":
        if seconds_remaining is None or seconds_remaining <= 0:
            return 0
        return int(math.floor(seconds_remaining * consts.time_rate))
    if consts.time_mode == "latency":
        if response_time_ms is None:
            return 0
        for threshold, bonus in consts.latency_tiers:
            if response_time_ms < threshold:
                return int(bonus)
        return 0
    return 0


def score_points(
    level: int,
    streak: int,
    consts: GameConstants,
    *,
    seconds_remaining: Optional[float] = None,
    response_time_ms: Optional[int] = None,
    hint_used: bool = False,
) -> int:
    raw = (
        consts.base_points * level_multiplier(level, consts.level_step)
        + streak_bonus(streak, consts.streak_divisor, consts.streak_unit)
        + time_bonus(consts, seconds_remaining, response_time_ms)
    )
    # round first so 2.9999999999 from float steps floors to 3
    points = max(int(math.floor(round(raw, 9))), 1)
    if hint_used:
        factor = min(max(float(consts.hint_penalty_factor), 0.0), 1.0)
        points = max(int(math.floor(points * factor)), 1)
    return points
