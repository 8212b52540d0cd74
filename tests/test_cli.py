import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from cogtrainer.app.cli import _parse, main
from cogtrainer.results.schema import Challenge


class CliTests(unittest.TestCase):
    def run_cli(self, *argv):
        buf = io.StringIO()
        with redirect_stdout(buf):
            code = main(list(argv))
        return code, buf.getvalue()

    def test_list_games(self) -> None:
        code, out = self.run_cli("list-games")
        self.assertEqual(code, 0)
        self.assertIn("math_master: Math Master", out)
        self.assertEqual(len(out.strip().splitlines()), 8)

    def test_show_params(self) -> None:
        code, out = self.run_cli("show-params", "--game", "reaction_time")
        self.assertEqual(code, 0)
        self.assertIn("time_mode: latency", out)

    def test_history_on_empty_store(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            cfg = Path(tmp) / "cfg.yml"
            cfg.write_text(f"storage:\n  backend: parquet\n  data_dir: {tmp}/data\n", encoding="utf-8")
            code, out = self.run_cli("history", "--config", str(cfg), "--game", "math_master", "--user", "ana")
        self.assertEqual(code, 0)
        self.assertIn("math_master: 0 games", out)

    def test_unknown_game_is_a_usage_error(self) -> None:
        for argv in (["history", "--game", "chess"], ["run", "--game", "chess"], ["show-params", "--game", "chess"]):
            err = io.StringIO()
            with redirect_stderr(err), self.assertRaises(SystemExit) as cm:
                main(argv)
            self.assertEqual(cm.exception.code, 2)
            self.assertIn("invalid choice", err.getvalue())
            self.assertIn("chess", err.getvalue())

    def test_parse_inputs(self) -> None:
        dots = Challenge(kind="dot_dash", level=1, content={}, answer=("dot", "dash"))
        self.assertEqual(_parse(dots, ".-"), [".", "-"])
        self.assertEqual(_parse(dots, "dot dash"), ["dot", "dash"])
        colors = Challenge(kind="color_trap", level=1, content={}, answer="red", options=("blue", "red"))
        self.assertEqual(_parse(colors, "2"), "red")
        self.assertEqual(_parse(colors, " red "), "red")
        shapes = Challenge(kind="shape_sorter", level=1, content={}, answer=("circle", "red", "medium"))
        self.assertEqual(_parse(shapes, "circle red medium"), ["circle", "red", "medium"])


if __name__ == "__main__":
    unittest.main()
