from __future__ import annotations

"""Terminal front-end for cogtrainer using SessionManager and the game registry."""

import argparse
import time
from typing import Any, Optional

from ..config.config import load_config, validate_config
from ..engine.controller import GameController
from ..results.schema import Challenge
from ..stats.stats import history_stats
from ..util.randomness import seed_if_needed

from .game_registry import get_game, list_games
from .session_manager import SessionManager, make_store

STIMULUS_SECONDS = 2.0
COMMANDS = "(h = hint, p = pause/resume, q = quit)"

ANSI = {
    "red": "31", "green": "32", "yellow": "33", "blue": "34",
    "purple": "35", "cyan": "36", "orange": "38;5;208", "pink": "38;5;213",
}


def _ink(word: str, color: str) -> str:
    return f"\033[1;{ANSI.get(color, '0')}m{word}\033[0m"


def _render(challenge: Challenge) -> str:
    c = challenge.content
    kind = challenge.kind
    if kind == "color_trap":
        opts = ", ".join(f"{i + 1}) {o}" for i, o in enumerate(challenge.options or ()))
        return f"{_ink(c['word'], c['ink'])}  What colour is the ink? {opts}"
    if kind == "dot_dash":
        return f"Remember this pattern: {c['morse']}"
    if kind == "sequence_sense":
        return "What comes next? " + ", ".join(str(n) for n in c["sequence"]) + ", ?"
    if kind == "shape_sorter":
        t = c["target"]
        opts = "; ".join(f"{i + 1}) {' '.join(o)}" for i, o in enumerate(challenge.options or ()))
        return f"Find the {t['size']} {t['color']} {t['type']}: {opts}"
    if kind == "word_chain":
        return f"Chain: {c['word']}  Say a word starting with '{c['start_letter']}'"
    if kind == "math_master":
        return f"{c['question']} = ?"
    if kind == "focus_flip":
        cells = [f"{i:>2}:{s:<10}" for i, s in enumerate(c["board"])]
        rows = ["  ".join(cells[i:i + 4]) for i in range(0, len(cells), 4)]
        return "Memorise the board:\n" + "\n".join(rows)
    if kind == "reaction_time":
        return "Get ready... press Enter as soon as you see GO!"
    return str(dict(c))


def _parse(challenge: Challenge, raw: str) -> Any:
    text = raw.strip()
    kind = challenge.kind
    if kind == "dot_dash":
        if " " in text:
            return text.split()
        return list(text)
    if kind in ("color_trap", "shape_sorter") and text.isdigit() and challenge.options:
        idx = int(text) - 1
        if 0 <= idx < len(challenge.options):
            return challenge.options[idx]
    if kind == "shape_sorter":
        return text.split()
    return text


def _stimulus_phase(ctl: GameController, challenge: Challenge) -> None:
    print(_render(challenge))
    time.sleep(STIMULUS_SECONDS)
    print("\n" * 30)
    if challenge.kind == "focus_flip":
        print(f"Where is the match for card {challenge.content['target']}? ({challenge.content['board'][challenge.content['target']]})")
    else:
        print("Now enter the pattern using . and - (e.g. .-.)")
    ctl.stimulus_shown()


def _reaction_round(ctl: GameController, challenge: Challenge) -> bool:
    print(_render(challenge))
    time.sleep(challenge.content["delay_ms"] / 1000.0)
    print("GO!")
    start = time.perf_counter()
    raw = input()
    if raw.strip().lower() == "q":
        ctl.quit()
        return False
    latency = int((time.perf_counter() - start) * 1000)
    ev = ctl.submit_answer(latency, response_time_ms=latency)
    if ev is not None:
        print(f"{latency} ms - {'in time!' if ev.correct else 'too slow'}")
    return True


def _play(ctl: GameController) -> None:
    ctl.bus.subscribe("level_up", lambda p: print(f"Level up! Now at level {p['level']}"))
    ctl.bus.subscribe("life_lost", lambda p: print(f"Not quite. Lives left: {p['lives']}"))
    ctl.bus.subscribe("finished", lambda p: print(f"\nSession over ({p['reason']})."))

    meta = get_game(ctl.kind)
    print(f"{meta.name}: {meta.description}")
    ctl.request_start()
    input(f"Press Enter to start {COMMANDS} ")
    ctl.confirm()

    while not ctl.finished.is_set():
        challenge = ctl.challenge
        if challenge is None:
            break
        if ctl.kind == "reaction_time":
            if not _reaction_round(ctl, challenge):
                break
            continue
        if ctl.state.state == "showing":
            _stimulus_phase(ctl, challenge)
        elif ctl.state.state != "paused":
            print(_render(challenge))
        status = f"[score {ctl.state.score} | level {ctl.state.level} | lives {ctl.state.lives}"
        if ctl.state.time_remaining_ms is not None:
            status += f" | {ctl.state.time_remaining_ms // 1000}s left"
        raw = input(status + "] > ")
        cmd = raw.strip().lower()
        if cmd == "q":
            ctl.quit()
        elif cmd == "p":
            ctl.toggle_pause()
            if ctl.state.state == "paused":
                print("Paused. Enter p to resume.")
        elif cmd == "h":
            hint = ctl.use_hint()
            print(hint or "No hint for this one.")
        else:
            ev = ctl.submit_answer(_parse(challenge, raw))
            if ev is not None and ev.correct:
                print(f"Correct! +{ev.points}")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="cogtrainer")
    sub = p.add_subparsers(dest="cmd", required=True)

    game_ids = [m.id for m in list_games()]
    sub.add_parser("list-games")

    sp = sub.add_parser("show-params")
    sp.add_argument("--game", required=True, choices=game_ids)

    rp = sub.add_parser("run")
    rp.add_argument("--config", default=None)
    rp.add_argument("--game", default=None, choices=game_ids)
    rp.add_argument("--user", default=None)
    rp.add_argument("--seed", type=int, default=None)
    rp.add_argument("--explain", action="store_true")

    hp = sub.add_parser("history")
    hp.add_argument("--config", default=None)
    hp.add_argument("--game", required=True, choices=game_ids)
    hp.add_argument("--user", default=None)

    args = p.parse_args(argv)

    if args.cmd == "list-games":
        for m in list_games():
            print(f"{m.id}: {m.name} - {m.description} | trains: {m.skill}")
        return 0

    if args.cmd == "show-params":
        m = get_game(args.game)
        print(f"Game {m.id}: {m.name}")
        for name, value in vars(m.constants).items():
            print(f"  - {name}: {value}")
        return 0

    if args.cmd == "history":
        cfg = validate_config(load_config(args.config))
        store = make_store(cfg)
        records = store.load_history(args.user, args.game)
        st = history_stats(records)
        print(f"{args.game}: {st.games_played} games, best {st.best_score}, average {st.average_score}, "
              f"accuracy {st.average_accuracy_percent}%, improvement {st.improvement_percent}%")
        return 0

    if args.cmd == "run":
        seed_if_needed()
        cfg = validate_config(load_config(args.config))
        if args.explain or cfg["explain"]["enabled"]:
            from .explain import enable as explain_enable
            explain_enable(True)

        sm = SessionManager(cfg)
        ctl = sm.start_session(args.game, user_id=args.user, seed=args.seed)
        try:
            _play(ctl)
        except (KeyboardInterrupt, EOFError):
            print()
        outcome = sm.finish_session()

        print("\nSession Summary:")
        print(outcome.summary)
        for tip in outcome.tips:
            print(f"  * {tip}")
        wait_s: Optional[float] = float(cfg["feedback"]["wait_s"]) if cfg["feedback"]["enabled"] else 0.0
        print()
        print(outcome.feedback.text(timeout=wait_s))
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
