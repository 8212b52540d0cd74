from __future__ import annotations

"""Base game abstractions: challenge generation, answer checking, option sets."""

import random
from typing import Any, Hashable, List, Sequence, Tuple

from ..errors import ContentGenerationError, InvalidResponseShape
from ..results.schema import Challenge


class BaseGame:
    """Abstract base for games.

    Subclasses implement `generate` (stochastic content, deterministic
    structure), `check` (raise InvalidResponseShape for malformed input)
    and `difficulty` (a tuple that never decreases as level rises).
    """

    kind: str = ""

    def generate(self, level: int, rng: random.Random) -> Challenge:
        raise NotImplementedError

    def check(self, challenge: Challenge, response: Any) -> bool:
        raise NotImplementedError

    def difficulty(self, level: int) -> Tuple[float, ...]:
        raise NotImplementedError

    def reset(self) -> None:
        """Forget per-session state; called when a session (re)starts."""

    def accept(self, challenge: Challenge, response: Any) -> None:
        """Called after a correct answer; stateful games advance here."""

    def evaluate(self, challenge: Challenge, response: Any) -> bool:
        """Total answer check: malformed responses are simply wrong."""
        if challenge.kind != self.kind:
            return False
        try:
            return bool(self.check(challenge, response))
        except InvalidResponseShape:
            return False


def scaled_length(level: int, base: int, k: int, maximum: int) -> int:
    """Sequence length `min(base + level // k, maximum)`."""
    return min(base + int(level) // k, maximum)


def pick_options(correct: Hashable, domain: Sequence[Hashable], n: int, rng: random.Random) -> Tuple[Any, ...]:
    """Return `n` shuffled options: the correct value plus n-1 distinct others.

    Distractors are drawn without replacement; a domain too small to supply
    them raises ContentGenerationError instead of retrying.
    """
    pool = [d for d in dict.fromkeys(domain) if d != correct]
    if n < 1 or len(pool) < n - 1:
        raise ContentGenerationError(
            f"need {n} distinct options but domain has {len(pool) + 1}"
        )
    opts: List[Any] = [correct] + rng.sample(pool, n - 1)
    rng.shuffle(opts)
    return tuple(opts)


def as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidResponseShape("expected a number, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise InvalidResponseShape(f"not a number: {value!r}") from exc
    raise InvalidResponseShape(f"expected a number, got {type(value).__name__}")


def as_text(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidResponseShape(f"expected text, got {type(value).__name__}")
    return value.strip().lower()


def as_sequence(value: Any) -> List[Any]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise InvalidResponseShape(f"expected a sequence, got {type(value).__name__}")
    return list(value)
