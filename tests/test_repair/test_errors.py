"""Tests for the repair error hierarchy."""
from __future__ import annotations

import pytest

from flowbridge.errors import FlowbridgeError
from flowbridge.repair import (
    EmptyResponseError,
    RepairAuthenticationError,
    RepairError,
    RepairRateLimitError,
    RepairRequestError,
    RepairServerError,
    RepairServiceError,
    SchemaValidationError,
    error_from_status_code,
)


class TestHierarchy:
    def test_base_is_flowbridge_error(self) -> None:
        assert issubclass(RepairError, FlowbridgeError)

    def test_cause(self) -> None:
        orig = ValueError("x")
        assert RepairError("wrapped", cause=orig).cause is orig

    def test_empty_response(self) -> None:
        assert str(EmptyResponseError("Claude returned empty content.")) == "Claude returned empty content."

    def test_schema_message(self) -> None:
        err = SchemaValidationError(["Missing key: summary", "layout_fixes must be array"])
        assert str(err) == "Claude schema invalid: Missing key: summary; layout_fixes must be array"
        assert err.errors == ["Missing key: summary", "layout_fixes must be array"]


class TestErrorFromStatusCode:
    @pytest.mark.parametrize(
        "status, cls",
        [
            (401, RepairAuthenticationError),
            (403, RepairAuthenticationError),
            (400, RepairRequestError),
            (404, RepairRequestError),
            (422, RepairRequestError),
            (429, RepairRateLimitError),
            (500, RepairServerError),
            (503, RepairServerError),
        ],
    )
    def test_mapping(self, status: int, cls: type) -> None:
        err = error_from_status_code(status, "boom")
        assert type(err) is cls
        assert err.status_code == status

    def test_retryable(self) -> None:
        assert error_from_status_code(429, "x").retryable
        assert error_from_status_code(502, "x").retryable
        assert not error_from_status_code(401, "x").retryable

    def test_unknown_status(self) -> None:
        err = error_from_status_code(418, "teapot")
        assert type(err) is RepairServiceError
        assert err.retryable

    def test_raw_kept(self) -> None:
        assert error_from_status_code(400, "x", raw={"error": "bad"}).raw == {"error": "bad"}
