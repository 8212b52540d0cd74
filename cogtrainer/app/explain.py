from __future__ import annotations

"""Minimal tracing helpers (Explain Mode).

Enable with the CLI flag or the `explain.enabled` config key and emit
terse, readable lines at session milestones and for skipped failures.
"""

import json
from typing import Any, Dict

_ENABLED = False


def enable(flag: bool = True) -> None:
    global _ENABLED
    _ENABLED = bool(flag)


def enabled() -> bool:
    return _ENABLED


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    data = payload or {}
    # one line JSON; non-serialisable values fall back to str()
    print(f"[EXPLAIN] {event} :: {json.dumps(data, separators=(',', ':'), default=str)}")


def trace_error(event: str, exc: BaseException, **extra: Any) -> None:
    trace(event, {"error": type(exc).__name__, "detail": str(exc), **extra})
