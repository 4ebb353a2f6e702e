"""End-to-end transcoding: route, convert, diagnose, repair, report."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from flowbridge.config import TranscodeOptions
from flowbridge.css.model import ClassIndex
from flowbridge.css.parser import parse_css
from flowbridge.diagnostics.engine import FailureDetection, detect_failure_conditions, diagnose
from flowbridge.diagnostics.model import Diagnostic, DiagnosticReport
from flowbridge.diagnostics.rules import DiagnosticContext
from flowbridge.graph.builder import build_payload
from flowbridge.graph.fixes import resolve_style_variables
from flowbridge.graph.model import XscpPayload
from flowbridge.graph.tokens import build_token_payload
from flowbridge.html.parser import parse_fragment
from flowbridge.repair.loop import RepairOutcome, SemanticRepairLoop
from flowbridge.routing.model import RoutingResult
from flowbridge.routing.router import route_css

__all__ = ["NO_ROOT_ISSUE", "TranscodingReport", "TranscodeResult", "transcode"]

logger = logging.getLogger(__name__)

NO_ROOT_ISSUE = "No root element found"


@dataclass
class TranscodingReport:
    """Human-readable account of one transcode.

    ``status`` is ``PASS`` exactly when ``remaining_issues`` is empty.
    """

    deterministic_fixes: list[str] = field(default_factory=list)
    semantic_fixes: list[str] = field(default_factory=list)
    claude_reasons: list[str] = field(default_factory=list)
    remaining_issues: list[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        return "FAIL" if self.remaining_issues else "PASS"

    @property
    def passed(self) -> bool:
        return not self.remaining_issues

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "deterministicFixes": list(self.deterministic_fixes),
            "semanticFixes": list(self.semantic_fixes),
            "claudeReasons": list(self.claude_reasons),
            "remainingIssues": list(self.remaining_issues),
        }


@dataclass
class TranscodeResult:
    payload: XscpPayload
    token_payload: XscpPayload
    routing: RoutingResult
    diagnostics: DiagnosticReport
    report: TranscodingReport
    used_semantic_recovery: bool = False
    findings: list[Diagnostic] = field(default_factory=list)
    detection: FailureDetection | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "webflowPayload": self.payload.to_dict(),
            "tokenPayload": self.token_payload.to_dict(),
            "embedCss": self.routing.embed,
            "diagnostics": self.diagnostics.to_dict(),
            "report": self.report.to_dict(),
            "usedSemanticRecovery": self.used_semantic_recovery,
        }


def _diagnose(html: str, payload: XscpPayload, class_index: ClassIndex) -> tuple[list[Diagnostic], DiagnosticReport]:
    findings = diagnose(DiagnosticContext(html, payload, class_index))
    return findings, DiagnosticReport.from_diagnostics(findings)


def transcode(
    html: str,
    css: str,
    options: TranscodeOptions | None = None,
    repair_loop: SemanticRepairLoop | None = None,
) -> TranscodeResult:
    """Transcode *html* and *css* into a paste-ready payload plus report.

    Never raises for bad input: markup without a root element produces an
    empty payload and a failing report.
    """
    options = options or TranscodeOptions()
    report = TranscodingReport()

    routing = route_css(css)
    stylesheet = parse_css(css)
    variables = stylesheet.variables
    report.deterministic_fixes.extend(f"CSS: {w.message}" for w in stylesheet.class_index.warnings)
    token_payload = build_token_payload(variables, options.token_namespace, raw=variables.raw)

    root = parse_fragment(html)
    if root is None:
        logger.warning("Transcode aborted: %s", NO_ROOT_ISSUE)
        report.remaining_issues.append(NO_ROOT_ISSUE)
        return TranscodeResult(
            payload=XscpPayload(),
            token_payload=token_payload,
            routing=routing,
            diagnostics=DiagnosticReport(),
            report=report,
        )

    payload, missing = build_payload(root, stylesheet.class_index, options.id_prefix)
    if missing:
        report.deterministic_fixes.append(
            f"CSS: {len(missing)} classes used but not defined: {', '.join(missing)}"
        )
    resolve_style_variables(payload.styles, variables)

    _, diagnostics = _diagnose(html, payload, stylesheet.class_index)
    detection = detect_failure_conditions(diagnostics, html, payload)

    outcome: RepairOutcome | None = None
    wants_repair = options.force_semantic_recovery or detection.should_invoke
    if not options.disable_semantic_recovery and wants_repair:
        loop = repair_loop or SemanticRepairLoop(options.repair)
        outcome = loop.run(html, css, payload, diagnostics)
        if outcome.used:
            payload = outcome.payload
            resolve_style_variables(payload.styles, variables)
            report.semantic_fixes.extend(outcome.semantic_fixes)

    findings, final = _diagnose(html, payload, stylesheet.class_index)
    report.remaining_issues.extend(final.summary())
    if outcome is not None:
        report.remaining_issues.extend(outcome.review_notes)
        if outcome.failure_message:
            report.remaining_issues.append(outcome.failure_message)
        if outcome.attempted:
            report.claude_reasons.extend(detection.reasons)

    logger.info("Transcode finished: %s (%d issue(s))", report.status, len(report.remaining_issues))
    return TranscodeResult(
        payload=payload,
        token_payload=token_payload,
        routing=routing,
        diagnostics=final,
        report=report,
        used_semantic_recovery=outcome is not None and outcome.used,
        findings=findings,
        detection=detection,
    )
