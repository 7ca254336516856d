"""
Exception types raised by kcomplexity.

Both derive from ValueError so callers that only care about "bad input"
can catch one type.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid or conflicting run configuration (bad k, window, threshold or mode)."""


class MalformedRecordError(ValueError):
    """An input record could not be parsed; processing of the stream stops."""

    def __init__(self, message: str, record_index: int | None = None) -> None:
        self.record_index = record_index
        if record_index is not None:
            message = f"record #{record_index}: {message}"
        super().__init__(message)
