"""Base error types shared across the transcoding pipeline."""

from __future__ import annotations


class FlowbridgeError(Exception):
    """Base error for all flowbridge failures."""


class MediaQueryError(FlowbridgeError):
    """Raised when a media query prelude cannot be parsed."""

    def __init__(
        self, message: str, line: int | None = None, column: int | None = None
    ):
        self.line = line
        self.column = column
        super().__init__(message)


class PayloadError(FlowbridgeError):
    """Raised when a document is not a well-formed XscpData payload."""
