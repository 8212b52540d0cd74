from __future__ import annotations

"""Schema constants and Pydantic models for Parquet-backed session records."""

from datetime import datetime, timezone
from typing import Literal, Optional

import pandas as pd
from pandas.api.types import CategoricalDtype
from pydantic import BaseModel, Field, ValidationInfo, field_validator

# --- Constants ---

GAME_KINDS = {
    "focus_flip",
    "color_trap",
    "dot_dash",
    "sequence_sense",
    "shape_sorter",
    "word_chain",
    "reaction_time",
    "math_master",
}
COUNTER_KEYS = ["correct", "attempts", "best_streak", "hints_used"]


def _cat_dtype(categories: set[str]) -> CategoricalDtype:
    return CategoricalDtype(categories=sorted(categories), ordered=False)


DTYPES = {
    "session_id": "string",
    # timezone-aware UTC timestamps
    "played_at": pd.DatetimeTZDtype(tz="UTC"),
    "user_id": "string",
    "game_kind": _cat_dtype(GAME_KINDS),
    "difficulty_tag": "string",
    "final_score": "UInt32",
    "final_level": "UInt8",
    "accuracy": "float64",
    "time_spent_s": "UInt32",
    "correct": "UInt16",
    "attempts": "UInt16",
    "best_streak": "UInt16",
    "hints_used": "UInt16",
    "avg_response_ms": "UInt32",
    "metadata_json": "string",
}


# --- Pydantic models ---

class SessionRecordRow(BaseModel):
    session_id: str = Field(min_length=1)
    played_at: datetime
    user_id: Optional[str] = None
    game_kind: Literal[tuple(GAME_KINDS)]  # type: ignore[valid-type]
    difficulty_tag: str = ""
    final_score: int = Field(ge=0, le=4294967295)
    final_level: int = Field(ge=1, le=255)
    accuracy: float = Field(ge=0.0, le=1.0)
    time_spent_s: int = Field(ge=0, le=4294967295)
    attempts: int = Field(default=0, ge=0, le=65535)
    correct: int = Field(default=0, ge=0, le=65535)
    best_streak: int = Field(default=0, ge=0, le=65535)
    hints_used: int = Field(default=0, ge=0, le=65535)
    avg_response_ms: int = Field(default=0, ge=0, le=4294967295)
    metadata_json: str = "{}"

    @field_validator("correct")
    @classmethod
    def _correct_le_attempts(cls, v: int, info: ValidationInfo) -> int:
        attempts = int(info.data.get("attempts", 0))
        if v > attempts:
            raise ValueError("correct must be <= attempts")
        return v

    @field_validator("played_at")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
