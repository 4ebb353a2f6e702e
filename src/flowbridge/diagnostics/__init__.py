"""Detect semantic loss between the source markup and the emitted graph."""

from flowbridge.diagnostics.engine import (
    FailureDetection,
    RuleFunc,
    build_report,
    detect_failure_conditions,
    diagnose,
)
from flowbridge.diagnostics.model import Diagnostic, DiagnosticReport, Severity
from flowbridge.diagnostics.rules import (
    ALL_RULES,
    FONT_FALLBACKS,
    LAYOUT_PROPERTIES,
    SPACING_PROPERTIES,
    DiagnosticContext,
    check_layout_degradation,
    check_missing_fonts,
    check_missing_spacing,
    check_orphans,
    check_phantoms,
    element_signature,
    is_fallback_font,
)

__all__ = [
    "ALL_RULES",
    "FONT_FALLBACKS",
    "LAYOUT_PROPERTIES",
    "SPACING_PROPERTIES",
    "Diagnostic",
    "DiagnosticContext",
    "DiagnosticReport",
    "FailureDetection",
    "RuleFunc",
    "Severity",
    "build_report",
    "check_layout_degradation",
    "check_missing_fonts",
    "check_missing_spacing",
    "check_orphans",
    "check_phantoms",
    "detect_failure_conditions",
    "diagnose",
    "element_signature",
    "is_fallback_font",
]
