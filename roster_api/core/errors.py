"""
Domain error taxonomy.

Every failure an operation is expected to report derives from RosterError and is
converted into a failure response at the operation boundary. Anything else is
treated as unexpected.
"""
from __future__ import annotations


class RosterError(Exception):
    """Base class for domain-level failures carrying a human readable message."""

    default_message = "Operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthorizationError(RosterError):
    """Caller roles do not intersect the required role policy."""

    default_message = "Insufficient role"


class NotFoundError(RosterError):
    default_message = "Not found"


class ValidationError(RosterError):
    """Malformed input, rejected before any store mutation."""

    default_message = "Invalid input"


class FetchError(RosterError):
    """Backing store failure during a batch dispatch."""

    default_message = "Failed to fetch from store"
