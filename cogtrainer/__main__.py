from __future__ import annotations

"""Allow `python -m cogtrainer`."""

from .app.cli import main

raise SystemExit(main())
