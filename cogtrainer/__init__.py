"""cogtrainer package initialization.

Adaptive scoring and progression engine for a set of children's
cognitive-training mini-games.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
