"""Failure taxonomy for upstream statistics lookups.

None of these ever reach callers of the public query surface; they travel
between the HTTP client, the extractors and the fallback chain, which logs
them and moves on to the next retry or variant.
"""
from typing import Optional


class StatsUnavailableError(Exception):
    """Base class: the current attempt produced no usable data."""


class TransportError(StatsUnavailableError):
    """Timeout, connection failure or non-2xx response."""

    def __init__(self, message: str, status_code: Optional[int] = None, retry_after_ms: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retry_after_ms = retry_after_ms


class ShapeError(StatsUnavailableError):
    """Payload parsed but lacks the fields we rely on."""


class InsufficientDataError(StatsUnavailableError):
    """Well-formed payload with nothing above the sample threshold."""
