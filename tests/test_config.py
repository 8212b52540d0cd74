import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from cogtrainer.app.presets import constants_for
from cogtrainer.config.config import load_config, validate_config


class ConfigTests(unittest.TestCase):
    def test_packaged_defaults(self) -> None:
        cfg = validate_config(load_config())
        self.assertEqual(cfg["session"]["game"], "color_trap")
        self.assertIsNone(cfg["session"]["seed"])
        self.assertEqual(cfg["storage"]["backend"], "parquet")
        self.assertFalse(cfg["feedback"]["enabled"])
        self.assertEqual(cfg["feedback"]["wait_s"], 3.0)
        self.assertEqual(cfg["games"], {})

    def test_empty_config_gets_every_section(self) -> None:
        cfg = validate_config({})
        for section in ("session", "games", "storage", "feedback", "explain"):
            self.assertIn(section, cfg)
        self.assertFalse(cfg["explain"]["enabled"])

    def test_invalid_values_warn_and_fall_back(self) -> None:
        raw = {
            "session": {"game": "chess", "seed": "abc"},
            "storage": {"backend": "mongo"},
            "feedback": {"timeout_s": "soon", "max_tokens": 0},
            "games": {"chess": {"starting_lives": 9}, "math_master": {"time_limit_s": 90}},
        }
        buf = io.StringIO()
        with redirect_stdout(buf):
            cfg = validate_config(raw)
        out = buf.getvalue()
        self.assertIn("WARNING: Unsupported game 'chess'", out)
        self.assertIn("WARNING: Unsupported storage backend 'mongo'", out)
        self.assertEqual(cfg["session"]["game"], "color_trap")
        self.assertIsNone(cfg["session"]["seed"])
        self.assertEqual(cfg["storage"]["backend"], "memory")
        self.assertEqual(cfg["feedback"]["timeout_s"], 10.0)
        self.assertEqual(cfg["feedback"]["max_tokens"], 500)
        self.assertNotIn("chess", cfg["games"])
        self.assertEqual(constants_for("math_master", cfg["games"]["math_master"]).time_limit_s, 90)

    def test_yaml_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cfg.yml"
            path.write_text(
                "session:\n  game: word_chain\n  seed: '7'\n  user_id: ana\n"
                "storage:\n  backend: memory\n",
                encoding="utf-8",
            )
            cfg = validate_config(load_config(str(path)))
        self.assertEqual(cfg["session"]["game"], "word_chain")
        self.assertEqual(cfg["session"]["seed"], 7)
        self.assertEqual(cfg["session"]["user_id"], "ana")
        self.assertEqual(cfg["storage"]["backend"], "memory")

    def test_missing_file_exits(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                load_config("/nonexistent/cogtrainer.yml")


if __name__ == "__main__":
    unittest.main()
