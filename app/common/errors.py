"""Error taxonomy shared by the scoring features.

Every error carries a snake_case ``code`` which routers surface as the
``detail`` of the HTTP response, with ``status_code`` as its status.
"""

from __future__ import annotations

from typing import Optional


class ScoringError(Exception):
    code = "scoring_error"
    status_code = 500

    def __init__(self, code: Optional[str] = None, message: Optional[str] = None) -> None:
        if code:
            self.code = code
        self.message = message or self.code
        super().__init__(self.message)


class ValidationError(ScoringError, ValueError):
    """Missing or malformed input. Raised before any write."""

    code = "invalid_request"
    status_code = 400


class NotFoundError(ScoringError, LookupError):
    """Referenced topic, challenge or attempt is missing or not owned by the caller."""

    code = "not_found"
    status_code = 404


class ExecutionFailure(ScoringError):
    """The execution service could not produce output for one run.

    Always caught by the judge and folded into the affected test case.
    """

    code = "execution_failed"
    status_code = 502


class PersistenceError(ScoringError, RuntimeError):
    code = "persistence_failed"


class UniqueViolation(PersistenceError):
    """A write collided with a uniqueness constraint."""

    code = "unique_violation"


__all__ = [
    "ScoringError",
    "ValidationError",
    "NotFoundError",
    "ExecutionFailure",
    "PersistenceError",
    "UniqueViolation",
]
