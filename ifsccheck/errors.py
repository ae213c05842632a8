"""
errors.py - Failure Types
=========================
Exceptions raised at the remote-lookup and input boundaries.

A malformed IFSC code is NOT an exception: the validator simply returns
False. Everything here is caught where it happens (one row, one console
action, one HTTP request), logged, and the enclosing loop carries on.
"""


class LookupFailure(Exception):
    """A remote directory call failed or returned no usable data."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


class NotFoundError(LookupFailure):
    """The directory has no entry for the code (HTTP 404)."""


class NetworkError(LookupFailure):
    """Connection problem, timeout, unexpected status or unreadable body."""


class RegionSearchError(LookupFailure):
    """The region search service could not be queried."""


class InputFailure(ValueError):
    """A required field was missing or blank."""
