from __future__ import annotations

"""SessionStore on top of the Parquet `storage` package."""

import json
from pathlib import Path
from typing import List, Optional

import pandas as pd
import pyarrow as pa
from pydantic import ValidationError

from storage.schema import SessionRecordRow
from storage.store import append_session_records, init_store, load_all, query_trend, validate_records

from ..errors import PersistenceFailure
from .schema import SessionRecord

_ROW_COUNTERS = ("correct", "attempts", "best_streak", "hints_used", "avg_response_ms")
# pyarrow type errors derive from TypeError, not ValueError
_STORE_ERRORS = (ValidationError, OSError, ValueError, TypeError, pa.ArrowException)


def record_to_row(record: SessionRecord) -> SessionRecordRow:
    meta = dict(record.metadata or {})
    counters = {k: int(meta.get(k, 0) or 0) for k in _ROW_COUNTERS}
    return SessionRecordRow(
        session_id=record.session_id,
        played_at=record.played_at,
        user_id=record.user_id,
        game_kind=record.game_kind,
        difficulty_tag=record.difficulty_tag,
        final_score=record.final_score,
        final_level=record.final_level,
        accuracy=record.accuracy,
        time_spent_s=record.time_spent_seconds,
        metadata_json=json.dumps(meta, sort_keys=True, default=str),
        **counters,
    )


def row_to_record(row: pd.Series) -> SessionRecord:
    meta_raw = row.get("metadata_json")
    meta = json.loads(meta_raw) if isinstance(meta_raw, str) and meta_raw else {}
    user = row.get("user_id")
    return SessionRecord(
        game_kind=str(row["game_kind"]),
        final_score=int(row["final_score"]),
        final_level=int(row["final_level"]),
        accuracy=float(row["accuracy"]),
        time_spent_seconds=int(row["time_spent_s"]),
        difficulty_tag=str(row["difficulty_tag"]) if not pd.isna(row["difficulty_tag"]) else "",
        metadata=meta,
        session_id=str(row["session_id"]),
        user_id=None if pd.isna(user) else str(user),
        played_at=row["played_at"].to_pydatetime(),
    )


class ParquetSessionStore:
    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)

    def save(self, record: SessionRecord) -> None:
        try:
            df = validate_records([record_to_row(record)])
            init_store(self.data_dir)
            append_session_records(df, self.data_dir)
        except _STORE_ERRORS as exc:
            raise PersistenceFailure(f"could not save session {record.session_id}: {exc}") from exc

    def load_history(self, user_id: Optional[str], game_kind: str) -> List[SessionRecord]:
        try:
            df = query_trend(load_all(self.data_dir), game_kind=game_kind, user_id=user_id)
        except _STORE_ERRORS as exc:
            raise PersistenceFailure(f"could not load history for {game_kind}: {exc}") from exc
        return [row_to_record(row) for _, row in df.iterrows()]
