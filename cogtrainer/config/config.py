from __future__ import annotations

"""Configuration loading and validation for cogtrainer.

This module loads YAML configuration, applies defaults, and validates
enumerations and numeric settings for the session runner.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import sys

import yaml

from ..app.presets import GAME_PRESETS


ALLOWED_BACKENDS = {"parquet", "memory"}
ALLOWED_GAMES = set(GAME_PRESETS)


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        return _load_yaml(Path(path))
    return _load_yaml(Path(__file__).with_name("defaults.yml"))


def _as_number(section: Dict[str, Any], key: str, default: float, *, minimum: float = 0.0) -> None:
    value = section.get(key, default)
    try:
        num = float(value)
    except (TypeError, ValueError):
        print(f"WARNING: Invalid {key} '{value}', using {default}.")
        num = float(default)
    if num < minimum:
        print(f"WARNING: {key} must be >= {minimum}, using {default}.")
        num = float(default)
    section[key] = num


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    # Shallow defaults for missing sections
    for name in ("session", "games", "storage", "feedback", "explain"):
        if not isinstance(cfg.get(name), dict):
            cfg[name] = {}

    session = cfg["session"]
    storage = cfg["storage"]
    feedback = cfg["feedback"]

    session.setdefault("user_id", None)
    session.setdefault("game", "color_trap")
    session.setdefault("seed", None)

    storage.setdefault("backend", "parquet")
    storage.setdefault("data_dir", "./storage/data")

    feedback.setdefault("enabled", False)
    feedback.setdefault("api_url", "https://api.x.ai/v1/chat/completions")
    feedback.setdefault("model", "grok-beta")
    feedback.setdefault("api_key_env", "GROK_API_KEY")
    feedback.setdefault("timeout_s", 10)
    feedback.setdefault("wait_s", 3)
    feedback.setdefault("max_tokens", 500)
    feedback.setdefault("temperature", 0.7)

    cfg["explain"].setdefault("enabled", False)

    # Enum validations
    game = session.get("game")
    if game not in ALLOWED_GAMES:
        print(f"WARNING: Unsupported game '{game}', using 'color_trap'.")
        session["game"] = "color_trap"

    backend = storage.get("backend")
    if backend not in ALLOWED_BACKENDS:
        print(f"WARNING: Unsupported storage backend '{backend}', using 'memory'.")
        storage["backend"] = "memory"

    seed = session.get("seed")
    if seed is not None:
        try:
            session["seed"] = int(seed)
        except (TypeError, ValueError):
            print(f"WARNING: Invalid seed '{seed}', ignoring it.")
            session["seed"] = None

    games = cfg["games"]
    for kind in list(games):
        if kind not in ALLOWED_GAMES or not isinstance(games[kind], dict):
            print(f"WARNING: Ignoring overrides for unknown game '{kind}'.")
            games.pop(kind)

    _as_number(feedback, "timeout_s", 10)
    _as_number(feedback, "wait_s", 3)
    _as_number(feedback, "temperature", 0.7)
    _as_number(feedback, "max_tokens", 500, minimum=1)
    feedback["max_tokens"] = int(feedback["max_tokens"])
    feedback["enabled"] = bool(feedback.get("enabled"))
    cfg["explain"]["enabled"] = bool(cfg["explain"].get("enabled"))

    return cfg
