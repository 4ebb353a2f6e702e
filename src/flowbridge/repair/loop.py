"""The semantic repair loop: request, validate, translate, apply.

At most two requests are made per run. The second happens only when the
first answer fails schema validation, and carries a corrective
instruction. Every failure is recorded on the outcome instead of raised.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from flowbridge.config import RepairConfig
from flowbridge.diagnostics.model import DiagnosticReport
from flowbridge.graph.model import XscpPayload
from flowbridge.repair.client import RepairClient
from flowbridge.repair.errors import RepairError, SchemaValidationError
from flowbridge.repair.patches import apply_patches
from flowbridge.repair.prompt import RETRY_INSTRUCTION, build_prompt
from flowbridge.repair.translate import PatchSet, translate_response

__all__ = ["RepairState", "RepairOutcome", "SemanticRepairLoop", "MAX_ATTEMPTS"]

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2


class RepairState(Enum):
    PARSED = "parsed"
    DETERMINISTIC = "deterministic"
    REPAIR_ATTEMPTED = "repair_attempted"
    RECONCILED = "reconciled"


@dataclass
class RepairOutcome:
    """What a repair run did to the payload.

    ``payload`` is the patched copy when repair succeeded and the input
    payload otherwise.
    """

    payload: XscpPayload
    state: RepairState = RepairState.DETERMINISTIC
    attempted: bool = False
    attempts: int = 0
    patch_set: PatchSet | None = None
    applied: list[str] = field(default_factory=list)
    semantic_fixes: list[str] = field(default_factory=list)
    review_notes: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def used(self) -> bool:
        return self.patch_set is not None

    @property
    def failure_message(self) -> str | None:
        return f"Claude recovery failed: {self.error}" if self.error else None


class SemanticRepairLoop:
    """Drive one repair run against a configured client."""

    def __init__(self, config: RepairConfig, client: RepairClient | None = None) -> None:
        self._config = config
        self._client = client

    def _request(self, client: RepairClient, prompt: str, outcome: RepairOutcome) -> dict:
        corrective: str | None = None
        while True:
            outcome.attempts += 1
            try:
                return client.request_semantic_response(prompt, corrective)
            except SchemaValidationError as exc:
                if outcome.attempts >= MAX_ATTEMPTS:
                    raise
                logger.warning("Repair response rejected, retrying: %s", exc)
                corrective = RETRY_INSTRUCTION

    def run(
        self,
        html: str,
        css: str,
        payload: XscpPayload,
        report: DiagnosticReport,
    ) -> RepairOutcome:
        outcome = RepairOutcome(payload=payload)
        if self._client is None and not self._config.enabled:
            logger.info("Semantic repair skipped: no API key configured")
            return outcome

        outcome.attempted = True
        outcome.state = RepairState.REPAIR_ATTEMPTED
        logger.info("Requesting semantic repair for %d issue(s)", len(report.summary()))

        owns_client = self._client is None
        client = self._client or RepairClient(self._config)
        try:
            response = self._request(client, build_prompt(html, css, payload, report), outcome)
        except RepairError as exc:
            logger.warning("Semantic repair failed: %s", exc)
            outcome.error = str(exc)
            return outcome
        finally:
            if owns_client:
                client.close()

        patch_set = translate_response(response, payload, report)
        patched, applied = apply_patches(payload, patch_set.patches)

        outcome.payload = patched
        outcome.patch_set = patch_set
        outcome.applied = applied
        outcome.semantic_fixes = [
            *applied,
            *(f"Claude note: {note}" for note in patch_set.notes),
            *(f"Claude summary: {issue}" for issue in patch_set.summary_issues),
        ]
        outcome.review_notes = [f"Requires review: {item}" for item in patch_set.requires_review]
        outcome.state = RepairState.RECONCILED
        logger.info("Semantic repair applied %d patch(es)", len(applied))
        return outcome
