"""Error hierarchy for the semantic repair service."""
from __future__ import annotations

from typing import Any

from flowbridge.errors import FlowbridgeError

__all__ = [
    "RepairError",
    "RepairServiceError",
    "RepairAuthenticationError",
    "RepairRequestError",
    "RepairRateLimitError",
    "RepairServerError",
    "RepairTimeoutError",
    "RepairNetworkError",
    "EmptyResponseError",
    "SchemaValidationError",
    "error_from_status_code",
]


class RepairError(FlowbridgeError):
    """Base error for all repair failures. Never fatal to a transcode."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class RepairServiceError(RepairError):
    """The completion endpoint answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retryable: bool = False,
        raw: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status_code = status_code
        self.retryable = retryable
        self.raw = raw


class RepairAuthenticationError(RepairServiceError):
    """The API key was rejected."""


class RepairRequestError(RepairServiceError):
    """The request was malformed or named an unknown model."""


class RepairRateLimitError(RepairServiceError):
    """Rate limit exceeded."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)


class RepairServerError(RepairServiceError):
    """Server-side error from the completion endpoint."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)


class RepairTimeoutError(RepairError):
    """The request did not complete within the configured timeout."""


class RepairNetworkError(RepairError):
    """A transport-level failure before any response arrived."""


class EmptyResponseError(RepairError):
    """The completion carried no message content."""


class SchemaValidationError(RepairError):
    """The model's answer was not valid JSON or did not match the schema.

    This is the only failure the repair loop retries.
    """

    PREFIX = "Claude schema invalid: "

    def __init__(self, errors: list[str], *, cause: Exception | None = None) -> None:
        self.errors = errors
        super().__init__(self.PREFIX + "; ".join(errors), cause=cause)


def error_from_status_code(
    status_code: int,
    message: str,
    *,
    raw: dict[str, Any] | None = None,
) -> RepairServiceError:
    """Map an HTTP status code to the appropriate error type."""
    common: dict[str, Any] = dict(status_code=status_code, raw=raw)

    if status_code in (401, 403):
        return RepairAuthenticationError(message, **common)
    if status_code in (400, 404, 413, 422):
        return RepairRequestError(message, **common)
    if status_code == 429:
        return RepairRateLimitError(message, **common)
    if 500 <= status_code <= 599:
        return RepairServerError(message, **common)
    return RepairServiceError(message, retryable=True, **common)
