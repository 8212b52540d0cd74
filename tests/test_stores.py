import tempfile
import unittest
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest import mock

import pandas as pd
import pyarrow as pa

from cogtrainer.errors import PersistenceFailure
from cogtrainer.results.parquet_store import ParquetSessionStore, record_to_row
from cogtrainer.results.result_manager import ResultManager
from cogtrainer.results.schema import SessionRecord
from storage import DATA_FILE, export_ndjson, load_all, query_trend, validate_records


T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def record(session_id, score, *, user="ana", kind="math_master", minutes=0, **meta):
    base = {"correct": 4, "attempts": 5, "best_streak": 3, "avg_response_ms": 1800, "hints_used": 0}
    base.update(meta)
    return SessionRecord(
        game_kind=kind,
        final_score=score,
        final_level=2,
        accuracy=0.8,
        time_spent_seconds=60,
        difficulty_tag="arithmetic",
        metadata=base,
        session_id=session_id,
        user_id=user,
        played_at=T0 + timedelta(minutes=minutes),
    )


class ResultManagerTests(unittest.TestCase):
    def test_history_is_per_user_and_game_oldest_first(self) -> None:
        store = ResultManager()
        store.save(record("b", 20, minutes=5))
        store.save(record("a", 10, minutes=1))
        store.save(record("c", 30, user="ben"))
        store.save(record("d", 40, kind="color_trap"))
        history = store.load_history("ana", "math_master")
        self.assertEqual([r.session_id for r in history], ["a", "b"])
        self.assertEqual(store.load_history("ana", "word_chain"), [])
        self.assertEqual(len(store.all_records()), 4)

    def test_last_write_wins(self) -> None:
        store = ResultManager()
        store.save(record("a", 10))
        store.save(record("a", 99))
        history = store.load_history("ana", "math_master")
        self.assertEqual([r.final_score for r in history], [99])

    def test_rejects_record_without_game(self) -> None:
        with self.assertRaises(PersistenceFailure):
            ResultManager().save(replace(record("a", 1), game_kind=""))


class ParquetStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name) / "data"
        self.store = ParquetSessionStore(self.data_dir)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_empty_history(self) -> None:
        self.assertEqual(self.store.load_history("ana", "math_master"), [])

    def test_round_trip_keeps_fields(self) -> None:
        saved = record("a", 120, end_reason="time_up")
        self.store.save(saved)
        self.assertTrue((self.data_dir / DATA_FILE).exists())
        (loaded,) = self.store.load_history("ana", "math_master")
        self.assertEqual(loaded.session_id, "a")
        self.assertEqual(loaded.final_score, 120)
        self.assertEqual(loaded.final_level, 2)
        self.assertAlmostEqual(loaded.accuracy, 0.8)
        self.assertEqual(loaded.user_id, "ana")
        self.assertEqual(loaded.played_at, saved.played_at)
        self.assertEqual(loaded.metadata, saved.metadata)

    def test_history_filters_and_orders(self) -> None:
        self.store.save(record("late", 30, minutes=10))
        self.store.save(record("early", 10, minutes=1))
        self.store.save(record("other-user", 50, user="ben"))
        self.store.save(record("anon", 60, user=None))
        self.store.save(record("other-game", 70, kind="word_chain"))
        self.assertEqual([r.session_id for r in self.store.load_history("ana", "math_master")], ["early", "late"])
        self.assertEqual([r.session_id for r in self.store.load_history(None, "math_master")], ["anon"])
        self.assertEqual([r.session_id for r in self.store.load_history("ana", "word_chain")], ["other-game"])

    def test_same_session_saved_twice_keeps_last(self) -> None:
        self.store.save(record("a", 10))
        self.store.save(record("a", 15))
        df = load_all(self.data_dir)
        self.assertEqual(len(df), 1)
        self.assertEqual(int(df["final_score"].iloc[0]), 15)

    def test_invalid_records_raise_persistence_failure(self) -> None:
        with self.assertRaises(PersistenceFailure):
            self.store.save(record("bad", 10, correct=9, attempts=5))
        with self.assertRaises(PersistenceFailure):
            self.store.save(record("chess", 10, kind="chess"))
        self.assertEqual(self.store.load_history("ana", "math_master"), [])

    def test_arrow_type_errors_raise_persistence_failure(self) -> None:
        target = "cogtrainer.results.parquet_store.append_session_records"
        with mock.patch(target, side_effect=pa.ArrowTypeError("bad column type")):
            with self.assertRaises(PersistenceFailure):
                self.store.save(record("a", 10))
        with mock.patch("cogtrainer.results.parquet_store.load_all", side_effect=TypeError("bad frame")):
            with self.assertRaises(PersistenceFailure):
                self.store.load_history("ana", "math_master")


class StoragePackageTests(unittest.TestCase):
    def test_typed_frame_and_export(self) -> None:
        df = validate_records([record_to_row(record("a", 10)), record_to_row(record("b", 20, minutes=1))])
        self.assertEqual(str(df["final_score"].dtype), "UInt32")
        self.assertIsInstance(df["game_kind"].dtype, pd.CategoricalDtype)
        self.assertEqual(str(df["played_at"].dt.tz), "UTC")
        with self.assertRaises(ValueError):
            query_trend(df, game_kind="chess")
        trend = query_trend(df, game_kind="math_master", user_id="ana")
        self.assertEqual(list(trend["session_id"]), ["a", "b"])
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "out" / "records.ndjson"
            export_ndjson(df, out)
            lines = out.read_text(encoding="utf-8").strip().splitlines()
            self.assertEqual(len(lines), 2)


if __name__ == "__main__":
    unittest.main()
