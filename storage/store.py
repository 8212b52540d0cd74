from __future__ import annotations

"""Parquet-backed store for session records using pandas + pyarrow.

Unit of data: one row per finished game session.
"""

from pathlib import Path
from typing import Optional

import pandas as pd
import pyarrow  # noqa: F401  (parquet engine)

from .schema import COUNTER_KEYS, DTYPES, GAME_KINDS, SessionRecordRow


DATA_FILE = "session_records.parquet"


def _empty_df() -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in DTYPES.items()})


def init_store(data_dir: Path) -> None:
    """Ensure data directory and an empty Parquet file with the right schema exist."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    path = data_dir / DATA_FILE
    if not path.exists():
        _empty_df().to_parquet(path, engine="pyarrow", compression="zstd", index=False)


def validate_records(records: list[SessionRecordRow]) -> pd.DataFrame:
    """Validate a list of SessionRecordRow (or dicts) and return a typed DataFrame.

    - Enforces game kinds, count ranges and correct <= attempts via Pydantic.
    - Returns a pandas DataFrame with categorical and unsigned integer dtypes.
    """
    if not isinstance(records, list):
        raise TypeError("records must be a list[SessionRecordRow]")
    rows = [r if isinstance(r, SessionRecordRow) else SessionRecordRow.model_validate(r) for r in records]
    df = pd.DataFrame([r.model_dump() for r in rows])
    return _fix_dtypes(df)


def _fix_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    for col, dt in DTYPES.items():
        if col not in df.columns:
            if col in COUNTER_KEYS:
                df[col] = 0
            else:
                df[col] = pd.NA
        df[col] = df[col].astype(dt)
    return df[list(DTYPES.keys())]


def append_session_records(df_new: pd.DataFrame, data_path: Path) -> None:
    """Append rows to the session_records table.

    - Reads existing, concatenates, fixes dtypes and writes back.
    - A row whose session_id is already stored replaces the old one (last write wins).
    """
    data_path = Path(data_path)
    f = data_path / DATA_FILE
    df_old = pd.read_parquet(f, engine="pyarrow") if f.exists() else _empty_df()
    df_new = _fix_dtypes(df_new.copy())
    if not df_old.empty:
        df_old = _fix_dtypes(df_old)
        df_old = df_old[~df_old["session_id"].isin(df_new["session_id"])]
    frames = [d for d in (df_old, df_new) if not d.empty]
    combined = pd.concat(frames, ignore_index=True) if frames else _empty_df()
    combined = _fix_dtypes(combined)
    combined.to_parquet(f, engine="pyarrow", compression="zstd", index=False)


def load_all(data_path: Path) -> pd.DataFrame:
    """Load every stored session record, sorted by played_at.

    Adds:
    - acc_pct: float32 = accuracy * 100
    - score_per_min: float32 = final_score per minute played
    """
    f = Path(data_path) / DATA_FILE
    if not f.exists():
        df = _empty_df()
    else:
        df = _fix_dtypes(pd.read_parquet(f, engine="pyarrow"))
    df = df.sort_values("played_at", kind="stable").reset_index(drop=True)
    df["acc_pct"] = (df["accuracy"].astype("float32") * 100).astype("float32")
    minutes = (df["time_spent_s"].astype("float32") / 60.0).where(df["time_spent_s"] > 0, other=1.0)
    df["score_per_min"] = (df["final_score"].astype("float32") / minutes).astype("float32")
    return df


def query_trend(df: pd.DataFrame, *, game_kind: str, user_id: Optional[str] = None) -> pd.DataFrame:
    """Filter rows for a game (and optionally a user) and sort by played_at."""
    if game_kind not in GAME_KINDS:
        raise ValueError(f"Unknown game kind: {game_kind}")
    mask = df["game_kind"].astype("string") == game_kind
    if user_id is None:
        mask &= df["user_id"].isna()
    else:
        mask &= df["user_id"].astype("string") == user_id
    dff = df[mask.fillna(False)]
    return dff.sort_values("played_at", kind="stable").reset_index(drop=True)


def export_ndjson(df: pd.DataFrame, out_path: Path) -> None:
    """Export a DataFrame to line-delimited JSON (NDJSON) for quick inspection."""
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_json(out_path, orient="records", lines=True, date_format="iso")
