import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

from analytics import (  # noqa: E402
    AnalyticsConfig,
    compute_metrics,
    ewma_by_session,
    load_and_prepare,
    plot_accuracy_by_game,
    plot_score_trend,
    plot_speed_vs_accuracy,
    summarize_by_game,
)
from cogtrainer.results.parquet_store import ParquetSessionStore  # noqa: E402
from cogtrainer.results.schema import SessionRecord  # noqa: E402
from storage import DATA_FILE  # noqa: E402


T0 = datetime(2026, 2, 1, tzinfo=timezone.utc)
MATH_SCORES = [100, 110, 120, 150, 200, 210, 220]


def record(i, kind, score, accuracy, hints=0):
    return SessionRecord(
        game_kind=kind,
        final_score=score,
        final_level=1,
        accuracy=accuracy,
        time_spent_seconds=60,
        difficulty_tag="test",
        metadata={"correct": 4, "attempts": 5, "avg_response_ms": 2000, "hints_used": hints, "best_streak": 2},
        session_id=f"{kind}-{i}",
        user_id="ana",
        played_at=T0 + timedelta(hours=i),
    )


class AnalyticsTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = tempfile.TemporaryDirectory()
        cls.tmp = Path(cls._tmp.name)
        store = ParquetSessionStore(cls.tmp)
        for i, score in enumerate(MATH_SCORES):
            store.save(record(i, "math_master", score, 0.8))
        store.save(record(20, "color_trap", 40, 0.5, hints=5))
        store.save(record(21, "color_trap", 60, 1.0))
        cls.cfg = AnalyticsConfig()
        cls.df = load_and_prepare(cls.tmp / DATA_FILE, cls.cfg)

    @classmethod
    def tearDownClass(cls) -> None:
        cls._tmp.cleanup()

    def test_prepared_columns(self) -> None:
        for col in ("acc_pct", "rt_factor", "hint_factor", "mark", "session_idx", "game_session_idx"):
            self.assertIn(col, self.df.columns)
        self.assertEqual(list(self.df["session_idx"]), list(range(len(self.df))))
        math = self.df[self.df["game_kind"].astype("string") == "math_master"]
        self.assertEqual(list(math["game_session_idx"]), list(range(len(MATH_SCORES))))

    def test_metrics_bounds(self) -> None:
        m = compute_metrics(self.df, self.cfg)
        self.assertTrue(((m["mark"] >= 0) & (m["mark"] <= 1)).all())
        hinted = m[m["session_id"] == "color_trap-20"]["hint_factor"].iloc[0]
        clean = m[m["session_id"] == "color_trap-21"]["hint_factor"].iloc[0]
        self.assertLess(hinted, clean)
        self.assertAlmostEqual(float(clean), 1.0)

    def test_summary_per_game(self) -> None:
        summary = summarize_by_game(self.df, self.cfg).set_index("game_kind")
        self.assertEqual(int(summary.loc["math_master", "games_played"]), 7)
        self.assertEqual(int(summary.loc["math_master", "best_score"]), 220)
        self.assertEqual(int(summary.loc["math_master", "improvement_pct"]), 91)
        self.assertEqual(int(summary.loc["color_trap", "improvement_pct"]), 0)
        self.assertEqual(int(summary.loc["color_trap", "average_accuracy_pct"]), 75)

    def test_ewma_per_game(self) -> None:
        out = ewma_by_session(self.df, value_col="final_score", span=3, group_cols=["game_kind"])
        self.assertIn("final_score_smooth", out.columns)
        first = out[out["session_id"] == "color_trap-20"]["final_score_smooth"].iloc[0]
        self.assertAlmostEqual(float(first), 40.0)

    def test_plots(self) -> None:
        smoothed = ewma_by_session(self.df, value_col="final_score", span=3, group_cols=["game_kind"])
        out = self.tmp / "reports"
        out.mkdir(exist_ok=True)
        self.assertTrue(plot_score_trend(smoothed, game_kind="math_master", save_path=out / "trend.png"))
        self.assertTrue(plot_accuracy_by_game(self.df, save_path=out / "acc.png"))
        self.assertTrue(plot_speed_vs_accuracy(self.df, save_path=out / "speed.png"))
        for name in ("trend.png", "acc.png", "speed.png"):
            self.assertTrue((out / name).exists())
        self.assertFalse(plot_score_trend(self.df, game_kind="word_chain"))
        self.assertFalse(plot_accuracy_by_game(self.df.iloc[0:0]))


if __name__ == "__main__":
    unittest.main()
