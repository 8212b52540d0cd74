from __future__ import annotations

"""Result schema dataclasses: challenges, answers, session state and records."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple


IDLE = "idle"
INSTRUCTIONS = "instructions"
PLAYING = "playing"
SHOWING = "showing"
INPUTTING = "inputting"
PAUSED = "paused"
FINISHED = "finished"

STATES = (IDLE, INSTRUCTIONS, PLAYING, SHOWING, INPUTTING, PAUSED, FINISHED)


@dataclass(frozen=True)
class Challenge:
    kind: str
    level: int
    content: Mapping[str, Any]
    answer: Any
    options: Optional[Tuple[Any, ...]] = None
    hint: Optional[str] = None


@dataclass(frozen=True)
class AnswerEvent:
    challenge: Challenge
    correct: bool
    response_time_ms: int
    hint_used: bool = False
    points: int = 0
    level: int = 1
    streak: int = 0


@dataclass
class SessionState:
    state: str = IDLE
    score: int = 0
    level: int = 1
    lives: int = 0
    streak: int = 0
    best_streak: int = 0
    time_remaining_ms: Optional[int] = None
    round_index: int = 0
    total_rounds: Optional[int] = None
    hints_used: int = 0
    events: List[AnswerEvent] = field(default_factory=list)


@dataclass(frozen=True)
class SessionRecord:
    game_kind: str
    final_score: int
    final_level: int
    accuracy: float
    time_spent_seconds: int
    difficulty_tag: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    session_id: str = ""
    user_id: Optional[str] = None
    played_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class HistoryStats:
    games_played: int = 0
    best_score: int = 0
    average_score: int = 0
    average_accuracy_percent: int = 0
    improvement_percent: int = 0
