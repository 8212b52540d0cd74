from __future__ import annotations

"""Metric computations for per-session and per-game analytics."""

import numpy as np
import pandas as pd
from .config import AnalyticsConfig


def compute_metrics(df: pd.DataFrame, cfg: AnalyticsConfig) -> pd.DataFrame:
    """Compute accuracy, speed and hint factors, and a composite mark.

    Returns a copy with added columns:
    - acc_pct, rt_factor, hint_factor, mark
    """
    out = df.copy()
    out["acc_pct"] = (out["accuracy"].astype("float32") * 100).astype("float32")

    # Response time factor: exp(-alpha * rt_mean/T_ref)
    rt = out["avg_response_ms"].astype("float32")
    out["rt_factor"] = np.exp(-float(cfg.alpha) * (rt / float(cfg.T_ref_ms))).astype("float32")

    # Hint factor: 1/(1 + w * hints per attempt)
    attempts = out["attempts"].astype("float32").where(out["attempts"] > 0, other=1.0)
    per_attempt = out["hints_used"].astype("float32") / attempts
    out["hint_factor"] = (1.0 / (1.0 + float(cfg.hint_weight) * per_attempt)).astype("float32")

    # Composite mark
    out["mark"] = (out["accuracy"].astype("float32") * out["rt_factor"] * out["hint_factor"]).clip(0, 1).astype("float32")
    return out


def _improvement(scores: pd.Series, cfg: AnalyticsConfig) -> int:
    if len(scores) < cfg.min_sessions:
        return 0
    w = cfg.improvement_window
    early = float(scores.iloc[:w].mean())
    recent = float(scores.iloc[-w:].mean())
    if early == 0:
        return 0
    return int(round((recent - early) / early * 100))


def summarize_by_game(df: pd.DataFrame, cfg: AnalyticsConfig) -> pd.DataFrame:
    """One row per game kind: counts, best/average score, accuracy and improvement.

    Expects rows sorted in play order (see `load_and_prepare`).
    """
    cols = ["game_kind", "games_played", "best_score", "average_score", "average_accuracy_pct", "improvement_pct", "mean_mark"]
    if df.empty:
        return pd.DataFrame({c: pd.Series(dtype="object") for c in cols})
    rows = []
    for kind, g in df.groupby(df["game_kind"].astype("string"), sort=True):
        scores = g["final_score"].astype("float64")
        rows.append(
            {
                "game_kind": kind,
                "games_played": int(len(g)),
                "best_score": int(scores.max()),
                "average_score": int(round(scores.mean())),
                "average_accuracy_pct": int(round(float(g["accuracy"].astype("float64").mean()) * 100)),
                "improvement_pct": _improvement(scores.reset_index(drop=True), cfg),
                "mean_mark": float(g["mark"].mean()) if "mark" in g.columns else float("nan"),
            }
        )
    return pd.DataFrame(rows, columns=cols)
