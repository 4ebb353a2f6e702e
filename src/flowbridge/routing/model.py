"""Data model for CSS routing decisions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from flowbridge.diagnostics.model import Severity

__all__ = [
    "ReasonKind",
    "RoutingReason",
    "RoutingDecision",
    "RouterWarning",
    "RoutingStats",
    "RoutingResult",
    "BREAKPOINT_ORDER",
]

# Embed buckets in output order.
BREAKPOINT_ORDER = ("base", "medium", "small", "tiny", "xlarge", "xxlarge", "xxxlarge")


class ReasonKind(Enum):
    DESCENDANT_SELECTOR = "descendant_selector"
    COMPOUND_SELECTOR = "compound_selector"
    PSEUDO_ELEMENT = "pseudo_element"
    COMPLEX_PSEUDO_CLASS = "complex_pseudo_class"
    ATTRIBUTE_SELECTOR = "attribute_selector"
    COMBINATOR = "combinator"
    VENDOR_PREFIX = "vendor_prefix"
    ID_SELECTOR = "id_selector"
    BARE_TAG_SELECTOR = "bare_tag_selector"
    AT_RULE = "at_rule"
    ROOT_VARIABLES = "root_variables"
    NON_STANDARD_MEDIA = "non_standard_media"


@dataclass(frozen=True)
class RoutingReason:
    kind: ReasonKind
    detail: str

    def __str__(self) -> str:
        return self.detail


@dataclass(frozen=True)
class RoutingDecision:
    """Why a rule was (or was not) routed to the embed block.

    ``reasons`` lists every matching reason in check order; a native rule has
    none.
    """

    selector: str
    needs_embed: bool
    reasons: tuple[RoutingReason, ...] = ()
    breakpoint: str | None = None

    @property
    def reason(self) -> str | None:
        return self.reasons[0].detail if self.reasons else None


@dataclass(frozen=True)
class RouterWarning:
    kind: str
    reason: str
    severity: Severity
    selector: str | None = None

    def __str__(self) -> str:
        target = f" [{self.selector}]" if self.selector else ""
        return f"{self.severity.value}{target}: {self.reason}"


@dataclass(frozen=True)
class RoutingStats:
    total_rules: int = 0
    native_rules: int = 0
    embed_rules: int = 0
    at_rules_extracted: int = 0
    embed_size_bytes: int = 0


@dataclass
class RoutingResult:
    """Native CSS, minified embed CSS and the decisions that produced them."""

    native: str = ""
    embed: str = ""
    decisions: list[RoutingDecision] = field(default_factory=list)
    warnings: list[RouterWarning] = field(default_factory=list)
    stats: RoutingStats = field(default_factory=RoutingStats)

    @property
    def has_embed(self) -> bool:
        return bool(self.embed)

    def to_dict(self) -> dict[str, object]:
        return {
            "native": self.native,
            "embed": self.embed,
            "decisions": [
                {
                    "selector": d.selector,
                    "needsEmbed": d.needs_embed,
                    "breakpoint": d.breakpoint,
                    "reasons": [{"kind": r.kind.value, "detail": r.detail} for r in d.reasons],
                }
                for d in self.decisions
            ],
            "warnings": [
                {
                    "type": w.kind,
                    "reason": w.reason,
                    "severity": w.severity.value.lower(),
                    "selector": w.selector,
                }
                for w in self.warnings
            ],
            "stats": {
                "totalRules": self.stats.total_rules,
                "nativeRules": self.stats.native_rules,
                "embedRules": self.stats.embed_rules,
                "atRulesExtracted": self.stats.at_rules_extracted,
                "embedSizeBytes": self.stats.embed_size_bytes,
            },
        }
