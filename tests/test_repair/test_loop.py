"""Tests for the semantic repair loop."""
from __future__ import annotations

from typing import Any

import pytest

from flowbridge.config import RepairConfig
from flowbridge.diagnostics import DiagnosticReport
from flowbridge.graph import NodeType, TargetNode, TargetStyle, XscpPayload
from flowbridge.repair import (
    RETRY_INSTRUCTION,
    RepairOutcome,
    RepairServerError,
    RepairState,
    SchemaValidationError,
    SemanticRepairLoop,
)


class FakeClient:
    """Replays queued answers; an exception in the queue is raised instead."""

    def __init__(self, *answers: Any) -> None:
        self.answers = list(answers)
        self.calls: list[tuple[str, str | None]] = []
        self.closed = False

    def request_semantic_response(self, prompt: str, corrective: str | None = None) -> dict[str, Any]:
        self.calls.append((prompt, corrective))
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def payload() -> XscpPayload:
    return XscpPayload(
        nodes=[TargetNode("n1", NodeType.HEADING, tag="h1", classes=["title"])],
        styles=[TargetStyle("title", "color: red;")],
    )


@pytest.fixture()
def report() -> DiagnosticReport:
    return DiagnosticReport(missing_fonts=[".title missing font-family"])


@pytest.fixture()
def fixed_response(make_response) -> dict[str, Any]:
    return make_response(
        summary={"issues_detected": ["font lost"], "confidence": "high"},
        typography_fixes=[
            {
                "target_class": "title",
                "font_family": "Inter, sans-serif",
                "font_weight": None,
                "line_height": None,
                "reason": "restore font",
            }
        ],
        parent_child_repairs=[
            {"parent_class": "x", "child_class": "missing", "action": "enforce_structure", "reason": "r"}
        ],
        requires_human_review=[{"issue": "check heading size", "context": "h1"}],
    )


def _run(loop: SemanticRepairLoop, payload: XscpPayload, report: DiagnosticReport) -> RepairOutcome:
    return loop.run("<h1 class='title'>Hi</h1>", ".title{color:red}", payload, report)


# ---------------------------------------------------------------------------
# Skipping
# ---------------------------------------------------------------------------


class TestSkipped:
    def test_no_key_no_client(self, payload, report) -> None:
        outcome = _run(SemanticRepairLoop(RepairConfig()), payload, report)
        assert outcome.attempted is False
        assert outcome.state is RepairState.DETERMINISTIC
        assert outcome.payload is payload
        assert outcome.used is False
        assert outcome.failure_message is None


# ---------------------------------------------------------------------------
# Successful runs
# ---------------------------------------------------------------------------


class TestReconciled:
    def test_patches_applied(self, payload, report, fixed_response) -> None:
        client = FakeClient(fixed_response)
        outcome = _run(SemanticRepairLoop(RepairConfig(), client=client), payload, report)

        assert outcome.attempted is True
        assert outcome.attempts == 1
        assert outcome.state is RepairState.RECONCILED
        assert outcome.used is True
        assert outcome.payload.style("title").style_less == "color: red; font-family: Inter, sans-serif;"
        assert payload.style("title").style_less == "color: red;"
        assert outcome.applied == ["mergeStyle:title"]
        assert outcome.semantic_fixes == [
            "mergeStyle:title",
            "Claude note: No parent nodes found for .missing",
            "Claude summary: font lost",
        ]
        assert outcome.review_notes == ["Requires review: check heading size (h1)"]
        assert outcome.error is None

    def test_prompt_sent_without_corrective(self, payload, report, make_response) -> None:
        client = FakeClient(make_response())
        _run(SemanticRepairLoop(RepairConfig(), client=client), payload, report)
        prompt, corrective = client.calls[0]
        assert prompt.startswith("INPUTS:")
        assert corrective is None

    def test_injected_client_left_open(self, payload, report, make_response) -> None:
        client = FakeClient(make_response())
        _run(SemanticRepairLoop(RepairConfig(), client=client), payload, report)
        assert client.closed is False


# ---------------------------------------------------------------------------
# Retry and failure
# ---------------------------------------------------------------------------


class TestRetry:
    def test_retries_once_after_schema_error(self, payload, report, fixed_response) -> None:
        client = FakeClient(SchemaValidationError(["Missing key: summary"]), fixed_response)
        outcome = _run(SemanticRepairLoop(RepairConfig(), client=client), payload, report)

        assert outcome.attempts == 2
        assert outcome.state is RepairState.RECONCILED
        assert [corrective for _, corrective in client.calls] == [None, RETRY_INSTRUCTION]
        assert client.calls[0][0] == client.calls[1][0]

    def test_two_schema_errors_recorded(self, payload, report) -> None:
        client = FakeClient(
            SchemaValidationError(["first"]),
            SchemaValidationError(["second"]),
        )
        outcome = _run(SemanticRepairLoop(RepairConfig(), client=client), payload, report)

        assert outcome.attempts == 2
        assert outcome.state is RepairState.REPAIR_ATTEMPTED
        assert outcome.used is False
        assert outcome.payload is payload
        assert outcome.error == "Claude schema invalid: second"
        assert outcome.failure_message == "Claude recovery failed: Claude schema invalid: second"

    def test_service_error_not_retried(self, payload, report) -> None:
        client = FakeClient(RepairServerError("Claude semantic recovery failed: 500 boom", status_code=500))
        outcome = _run(SemanticRepairLoop(RepairConfig(), client=client), payload, report)

        assert outcome.attempts == 1
        assert len(client.calls) == 1
        assert outcome.error == "Claude semantic recovery failed: 500 boom"
        assert outcome.semantic_fixes == []
