from __future__ import annotations

"""Matplotlib plots for score trends, accuracy per game, and speed vs accuracy."""

import os
from typing import Optional
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt


def plot_score_trend(
    df: pd.DataFrame,
    *,
    game_kind: Optional[str] = None,
    value_col: str = "final_score",
    save_path: Optional[str | os.PathLike[str]] = None,
) -> bool:
    """Scatter of `value_col` per session with its EWMA line when present."""
    g = df.copy()
    if game_kind is not None:
        g = g[g["game_kind"].astype("string") == game_kind]
    if g.empty:
        return False
    x_col = "game_session_idx" if game_kind is not None and "game_session_idx" in g.columns else "session_idx"
    g = g.sort_values(x_col)
    plt.figure()
    plt.plot(g[x_col], g[value_col], marker="o", linestyle="", label=value_col)
    smooth_col = f"{value_col}_smooth"
    if smooth_col in g.columns:
        plt.plot(g[x_col], g[smooth_col], linewidth=2, label=f"{value_col} (EWMA)")
    plt.xlabel("Session")
    plt.ylabel(value_col)
    plt.title(f"Trend: {game_kind}" if game_kind else "Trend")
    plt.legend()
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()
    return True


def plot_accuracy_by_game(
    df: pd.DataFrame,
    *,
    save_path: Optional[str | os.PathLike[str]] = None,
) -> bool:
    if df.empty:
        return False
    means = df.groupby(df["game_kind"].astype("string"))["accuracy"].mean().sort_index() * 100
    if means.empty:
        return False
    x = np.arange(len(means))
    plt.figure()
    plt.bar(x, means.to_numpy())
    plt.xticks(ticks=x, labels=means.index.tolist(), rotation=30, ha="right")
    plt.ylim(0, 100)
    plt.ylabel("Average accuracy (%)")
    plt.title("Accuracy by game")
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()
    return True


def plot_speed_vs_accuracy(
    df: pd.DataFrame,
    *,
    save_path: Optional[str | os.PathLike[str]] = None,
) -> bool:
    if df.empty:
        return False
    plt.figure()
    plt.scatter(df["avg_response_ms"].astype("float64"), df["accuracy"].astype("float64") * 100, alpha=0.4)
    plt.xlabel("Average response time (ms)")
    plt.ylabel("Accuracy (%)")
    plt.title("Speed vs accuracy")
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()
    return True
