from __future__ import annotations

"""Load Parquet session records and compute derived metrics."""

from pathlib import Path
import pandas as pd
from .config import AnalyticsConfig
from .metrics import compute_metrics


def load_and_prepare(parquet_path: Path, cfg: AnalyticsConfig) -> pd.DataFrame:
    """Read session records Parquet and compute metrics with consistent dtypes.

    - Ensures 'game_kind' is categorical.
    - Sorts by (played_at, session_id) if available, else by session_id.
    - Computes metrics and adds a stable session index 'session_idx' plus a
      per-game play counter 'game_session_idx'.
    """
    df = pd.read_parquet(parquet_path)
    if "game_kind" in df.columns:
        df["game_kind"] = df["game_kind"].astype("category")
    if "played_at" in df.columns:
        df = df.sort_values(["played_at", "session_id"], kind="stable")
    else:
        df = df.sort_values(["session_id"], kind="stable")
    df = df.reset_index(drop=True)

    df = compute_metrics(df, cfg)
    # Stable session order index
    df["session_idx"] = pd.factorize(df["session_id"])[0]
    df["game_session_idx"] = df.groupby("game_kind", observed=True).cumcount()
    return df
