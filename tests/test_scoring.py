import io
import unittest
from contextlib import redirect_stdout
from dataclasses import replace

from cogtrainer.app.presets import GAME_PRESETS, GameConstants, constants_for
from cogtrainer.scoring.scoring import level_multiplier, score_points, streak_bonus, time_bonus


COLOR_LIKE = GameConstants(
    base_points=10,
    level_step=0.2,
    streak_divisor=3,
    streak_unit=2,
    time_mode="countdown",
    time_rate=1.0,
    time_limit_s=30,
)


class ScoringTests(unittest.TestCase):
    def test_first_answer_with_full_clock(self) -> None:
        self.assertEqual(score_points(1, 0, COLOR_LIKE, seconds_remaining=30), 40)

    def test_streak_bonus_added_per_completed_group(self) -> None:
        self.assertEqual(score_points(1, 6, COLOR_LIKE, seconds_remaining=30), 44)
        self.assertEqual(streak_bonus(2, 3, 2), 0)
        self.assertEqual(streak_bonus(7, 3, 2), 4)
        self.assertEqual(streak_bonus(7, 0, 2), 0)

    def test_level_multiplier(self) -> None:
        self.assertAlmostEqual(level_multiplier(1, 0.2), 1.0)
        self.assertAlmostEqual(level_multiplier(6, 0.2), 2.0)
        # 10 * 1.2 = 12, not 11 from float drift
        self.assertEqual(score_points(2, 0, replace(COLOR_LIKE, time_mode="none")), 12)

    def test_hint_never_increases_points(self) -> None:
        consts = replace(COLOR_LIKE, hint_penalty_factor=0.5)
        for level in range(1, 11):
            for streak in range(0, 13):
                for seconds in (0, 7.5, 30):
                    plain = score_points(level, streak, consts, seconds_remaining=seconds)
                    hinted = score_points(level, streak, consts, seconds_remaining=seconds, hint_used=True)
                    self.assertGreaterEqual(plain, 1)
                    self.assertGreaterEqual(hinted, 1)
                    self.assertLessEqual(hinted, plain)
        self.assertEqual(score_points(1, 0, consts, seconds_remaining=30, hint_used=True), 20)

    def test_minimum_one_point(self) -> None:
        zero = GameConstants(base_points=0, level_step=0.0, streak_unit=0, time_mode="none", hint_penalty_factor=0.1)
        self.assertEqual(score_points(1, 0, zero), 1)
        self.assertEqual(score_points(1, 0, zero, hint_used=True), 1)

    def test_latency_tiers(self) -> None:
        consts = GAME_PRESETS["reaction_time"]
        self.assertEqual(time_bonus(consts, response_time_ms=150), 50)
        self.assertEqual(time_bonus(consts, response_time_ms=200), 20)
        self.assertEqual(time_bonus(consts, response_time_ms=800), 0)
        self.assertEqual(time_bonus(consts), 0)
        self.assertEqual(score_points(1, 0, consts, response_time_ms=150), 60)
        self.assertEqual(score_points(1, 0, consts, response_time_ms=300), 30)
        self.assertEqual(score_points(1, 0, consts, response_time_ms=800), 10)

    def test_countdown_bonus_floors(self) -> None:
        consts = GAME_PRESETS["shape_sorter"]
        self.assertEqual(time_bonus(consts, seconds_remaining=45), 22)
        self.assertEqual(time_bonus(consts, seconds_remaining=0), 0)
        self.assertEqual(time_bonus(consts, seconds_remaining=None), 0)
        self.assertEqual(time_bonus(GAME_PRESETS["dot_dash"], seconds_remaining=45, response_time_ms=10), 0)


class PresetTests(unittest.TestCase):
    def test_every_game_has_a_preset(self) -> None:
        self.assertEqual(len(GAME_PRESETS), 8)
        for kind, consts in GAME_PRESETS.items():
            self.assertIn(consts.time_mode, ("countdown", "latency", "none"), kind)
            self.assertGreaterEqual(consts.starting_lives, 1, kind)
            self.assertTrue(consts.timed or consts.total_rounds, kind)

    def test_overrides(self) -> None:
        consts = constants_for("math_master", {"time_limit_s": 90, "latency_tiers": [[1000, 10]]})
        self.assertEqual(consts.time_limit_s, 90)
        self.assertEqual(consts.latency_tiers, ((1000, 10),))
        self.assertIs(constants_for("math_master"), GAME_PRESETS["math_master"])

    def test_unknown_keys_ignored_and_unknown_kind_rejected(self) -> None:
        consts = constants_for("color_trap", {"bogus": 1, "starting_lives": 5})
        self.assertEqual(consts.starting_lives, 5)
        with self.assertRaises(KeyError):
            constants_for("chess")

    def test_invalid_overrides_keep_preset_values(self) -> None:
        preset = GAME_PRESETS["color_trap"]
        cases = [
            ("time_mode", "bogus"),
            ("level_up_rule", "bogus"),
            ("starting_lives", 0),
            ("starting_lives", "three"),
            ("level_up_threshold", 0),
            ("hint_penalty_factor", 0),
            ("hint_penalty_factor", 1.5),
            ("max_level", -1),
            ("time_limit_s", 0),
            ("latency_tiers", "fast"),
        ]
        for name, value in cases:
            buf = io.StringIO()
            with redirect_stdout(buf):
                consts = constants_for("color_trap", {name: value})
            self.assertEqual(getattr(consts, name), getattr(preset, name), name)
            self.assertIn(f"WARNING: color_trap.{name}=", buf.getvalue())

    def test_valid_overrides_pass_checks(self) -> None:
        buf = io.StringIO()
        with redirect_stdout(buf):
            consts = constants_for(
                "color_trap",
                {"time_mode": "none", "level_up_rule": "streak", "starting_lives": 1,
                 "level_up_threshold": 1, "hint_penalty_factor": 1, "time_limit_s": None, "total_rounds": 5},
            )
        self.assertEqual(buf.getvalue(), "")
        self.assertEqual((consts.time_mode, consts.level_up_rule), ("none", "streak"))
        self.assertEqual((consts.starting_lives, consts.level_up_threshold), (1, 1))
        self.assertEqual(consts.hint_penalty_factor, 1)
        self.assertFalse(consts.timed)


if __name__ == "__main__":
    unittest.main()
