from __future__ import annotations

"""Demo script for the analytics module.

Loads Parquet session records, computes metrics, smooths score trends and
writes a per-game summary plus basic plots to ./reports.
"""

from pathlib import Path
from analytics.config import AnalyticsConfig
from analytics.metrics import summarize_by_game
from analytics.prepare import load_and_prepare
from analytics.smoothing import ewma_by_session
from analytics.plots import plot_score_trend, plot_accuracy_by_game, plot_speed_vs_accuracy


def main(parquet: Path = Path("storage/data/session_records.parquet"), outdir: Path = Path("reports")) -> int:
    cfg = AnalyticsConfig()
    if not parquet.exists():
        print(f"Parquet file not found: {parquet}")
        return 2

    df = load_and_prepare(parquet, cfg)
    for col in ["final_score", "mark"]:
        df = ewma_by_session(df, value_col=col, span=cfg.smoothing_span, group_cols=["game_kind"], order_col="session_idx")

    outdir.mkdir(exist_ok=True, parents=True)
    for kind in sorted(df["game_kind"].astype("string").unique()):
        plot_score_trend(df, game_kind=kind, save_path=outdir / f"trend_{kind}.png")
    plot_accuracy_by_game(df, save_path=outdir / "accuracy_by_game.png")
    plot_speed_vs_accuracy(df, save_path=outdir / "speed_vs_accuracy.png")

    summary = summarize_by_game(df, cfg)
    summary.to_csv(outdir / "games_summary.csv", index=False)
    print(summary.to_string(index=False))
    print(f"Reports saved to: {outdir.resolve()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
