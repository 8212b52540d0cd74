from __future__ import annotations

"""Error taxonomy for the training engine.

Every failure here has a defined fallback: generation errors end the
session, malformed answers count as wrong, persistence and feedback
failures are traced and skipped.
"""


class CogTrainerError(Exception):
    """Base class for engine errors."""


class ContentGenerationError(CogTrainerError):
    """The content domain is too small to build the requested challenge."""


class InvalidResponseShape(CogTrainerError):
    """A user response has the wrong type or arity for its challenge."""


class PersistenceFailure(CogTrainerError):
    """A session record could not be saved or history could not be loaded."""


class FeedbackUnavailable(CogTrainerError):
    """The remote feedback service failed, timed out or is not configured."""
