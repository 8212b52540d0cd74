import io
import os
import random
import unittest
from contextlib import redirect_stdout
from unittest import mock

from cogtrainer.app import explain
from cogtrainer.app.events import EventBus
from cogtrainer.results.schema import STATES
from cogtrainer.util.randomness import make_rng, seed_if_needed

from tests.fakes import make_controller


class EventBusTests(unittest.TestCase):
    def test_subscribe_emit_unsubscribe(self) -> None:
        bus = EventBus()
        got = []
        bus.subscribe("tick", got.append)
        bus.emit("tick", 1)
        bus.unsubscribe("tick", got.append)
        bus.emit("tick", 2)
        self.assertEqual(got, [1])

    def test_broken_handler_does_not_stop_others(self) -> None:
        bus = EventBus()
        got = []

        def broken(payload):
            raise RuntimeError("render failed")

        bus.subscribe("finished", broken)
        bus.subscribe("finished", got.append)
        buf = io.StringIO()
        explain.enable(True)
        try:
            with redirect_stdout(buf):
                bus.emit("finished", {"reason": "quit"})
        finally:
            explain.enable(False)
        self.assertEqual(got, [{"reason": "quit"}])
        self.assertIn("[EXPLAIN] handler_error", buf.getvalue())

    def test_controller_only_publishes_known_states(self) -> None:
        ctl, timers, _ = make_controller("focus_flip")
        seen = []
        ctl.bus.subscribe("state_changed", lambda p: seen.append(p["to"]))
        ctl.request_start()
        ctl.confirm()
        ctl.stimulus_shown()
        ctl.pause()
        ctl.resume()
        ctl.submit_answer(ctl.challenge.answer)
        timers.last.fire()
        ctl.quit()
        self.assertTrue(seen)
        self.assertTrue(set(seen) <= set(STATES))


class ExplainTests(unittest.TestCase):
    def tearDown(self) -> None:
        explain.enable(False)

    def test_silent_unless_enabled(self) -> None:
        buf = io.StringIO()
        with redirect_stdout(buf):
            explain.trace("session_started", {"game": "dot_dash"})
        self.assertEqual(buf.getvalue(), "")
        self.assertFalse(explain.enabled())

    def test_one_json_line(self) -> None:
        explain.enable(True)
        self.assertTrue(explain.enabled())
        buf = io.StringIO()
        with redirect_stdout(buf):
            explain.trace_error("save_failed", ValueError("disk"), session="s1")
        self.assertEqual(
            buf.getvalue().strip(),
            '[EXPLAIN] save_failed :: {"error":"ValueError","detail":"disk","session":"s1"}',
        )


class RandomnessTests(unittest.TestCase):
    def test_seed_env(self) -> None:
        with mock.patch.dict(os.environ, {"SEED": "12"}):
            self.assertEqual(seed_if_needed(), 12)
            self.assertEqual(make_rng().random(), random.Random(12).random())
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertIsNone(seed_if_needed())
        self.assertEqual(make_rng(3).random(), random.Random(3).random())


if __name__ == "__main__":
    unittest.main()
