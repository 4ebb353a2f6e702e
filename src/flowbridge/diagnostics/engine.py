"""Run the diagnostic rules and decide whether semantic repair is needed."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from flowbridge.diagnostics.model import Diagnostic, DiagnosticReport
from flowbridge.diagnostics.rules import ALL_RULES, SPACING_PROPERTIES, DiagnosticContext
from flowbridge.graph.model import XscpPayload
from flowbridge.html.parser import analyze_markup
from flowbridge.styleless import parse_style_less

__all__ = [
    "RuleFunc",
    "FailureDetection",
    "diagnose",
    "build_report",
    "detect_failure_conditions",
]

RuleFunc = Callable[[DiagnosticContext], list[Diagnostic]]

# Report list -> failure reason, in report order.
_FAILURE_REASONS = (
    ("missing_fonts", "Font-family fallback detected"),
    ("layout_degradation", "Flex/Grid structure degradation detected"),
    ("missing_spacing", "Missing spacing/sizing detected"),
    ("orphaned_elements", "Orphaned classes or children detected"),
    ("phantom_elements", "Phantom elements detected in Webflow output"),
)
_COLLAPSE_REASON = "Repeated components collapse detected"


@dataclass(frozen=True)
class FailureDetection:
    should_invoke: bool
    reasons: list[str] = field(default_factory=list)
    collapsed_repeats: list[str] = field(default_factory=list)


def diagnose(ctx: DiagnosticContext, extra_rules: list[RuleFunc] | None = None) -> list[Diagnostic]:
    """Run all diagnostic rules against *ctx*."""
    rules: list[RuleFunc] = list(ALL_RULES)
    if extra_rules:
        rules.extend(extra_rules)
    diagnostics: list[Diagnostic] = []
    for rule in rules:
        diagnostics.extend(rule(ctx))
    return diagnostics


def build_report(ctx: DiagnosticContext) -> DiagnosticReport:
    """A fresh report; never reuses results from an earlier run."""
    return DiagnosticReport.from_diagnostics(diagnose(ctx))


def detect_failure_conditions(
    report: DiagnosticReport,
    html: str,
    payload: XscpPayload,
) -> FailureDetection:
    """Decide whether the deterministic output lost enough to call for repair.

    Orphans alone never trigger repair. A class used at least twice in the
    source whose emitted style has no spacing or sizing counts as a
    collapsed repeat.
    """
    reasons = [reason for bucket, reason in _FAILURE_REASONS if getattr(report, bucket)]

    styles = {style.name: style for style in payload.styles}
    collapsed: list[str] = []
    for class_name, count in analyze_markup(html).classes.items():
        if count < 2 or class_name not in styles:
            continue
        props = parse_style_less(styles[class_name].style_less)
        if not any(prop in SPACING_PROPERTIES for prop in props):
            collapsed.append(f".{class_name} repeats without sizing/spacing")
    if collapsed:
        reasons.append(_COLLAPSE_REASON)

    return FailureDetection(should_invoke=bool(reasons), reasons=reasons, collapsed_repeats=collapsed)
