"""Diagnostic model: findings about semantic loss in the emitted graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

__all__ = ["Severity", "Diagnostic", "DiagnosticReport"]


class Severity(Enum):
    """Severity level for a diagnostic message."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass(frozen=True)
class Diagnostic:
    """A single finding about the emitted payload.

    Attributes:
        rule: Identifier for the rule that produced this diagnostic.
        severity: How serious the issue is.
        message: Human-readable description, in the report's entry format.
        node_id: The node involved, if applicable.
        class_name: The class involved, if applicable.
        fix: Suggested remediation, if available.
    """

    rule: str
    severity: Severity
    message: str
    node_id: str | None = None
    class_name: str | None = None
    fix: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @property
    def is_warning(self) -> bool:
        return self.severity is Severity.WARNING

    def __str__(self) -> str:
        location = ""
        if self.node_id:
            location = f" [node={self.node_id}]"
        elif self.class_name:
            location = f" [class={self.class_name}]"
        return f"{self.severity.value}{location}: {self.message}"


# Rule name -> report list it feeds.
_RULE_BUCKETS = {
    "check_missing_fonts": "missing_fonts",
    "check_layout_degradation": "layout_degradation",
    "check_missing_spacing": "missing_spacing",
    "check_orphans": "orphaned_elements",
    "check_phantoms": "phantom_elements",
}


@dataclass
class DiagnosticReport:
    """Five lists of human-readable findings. Rebuilt from scratch on every run."""

    missing_fonts: list[str] = field(default_factory=list)
    layout_degradation: list[str] = field(default_factory=list)
    missing_spacing: list[str] = field(default_factory=list)
    orphaned_elements: list[str] = field(default_factory=list)
    phantom_elements: list[str] = field(default_factory=list)

    @classmethod
    def from_diagnostics(cls, diagnostics: Iterable[Diagnostic]) -> "DiagnosticReport":
        report = cls()
        for diagnostic in diagnostics:
            bucket = _RULE_BUCKETS.get(diagnostic.rule)
            if bucket is not None:
                getattr(report, bucket).append(diagnostic.message)
        return report

    def is_empty(self) -> bool:
        return not any(
            (
                self.missing_fonts,
                self.layout_degradation,
                self.missing_spacing,
                self.orphaned_elements,
                self.phantom_elements,
            )
        )

    def summary(self) -> list[str]:
        return [
            *self.missing_fonts,
            *self.layout_degradation,
            *self.missing_spacing,
            *self.orphaned_elements,
            *self.phantom_elements,
        ]

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "missingFonts": list(self.missing_fonts),
            "layoutDegradation": list(self.layout_degradation),
            "missingSpacing": list(self.missing_spacing),
            "orphanedElements": list(self.orphaned_elements),
            "phantomElements": list(self.phantom_elements),
        }
