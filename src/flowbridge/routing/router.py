"""Route CSS rules to native styles or to a literal embed block.

A rule stays native when the target style model can express it: a class
selector, optionally with a supported state pseudo-class, inside a
width-based media query. Everything else is relocated, never dropped, to
the embed CSS, grouped by breakpoint.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping

from flowbridge.css.lexer import CssAtBlock, CssRuleBlock, split_declarations, tokenize_css
from flowbridge.css.media import MediaKind, classify_media
from flowbridge.css.model import PSEUDO_VARIANTS
from flowbridge.css.variables import extract_variables, resolve_value
from flowbridge.diagnostics.model import Severity
from flowbridge.routing.minifier import minify_css
from flowbridge.routing.model import (
    BREAKPOINT_ORDER,
    ReasonKind,
    RouterWarning,
    RoutingDecision,
    RoutingReason,
    RoutingResult,
    RoutingStats,
)
from flowbridge.styleless import split_top_level

__all__ = [
    "route_css",
    "classify_selector",
    "classify_declarations",
    "format_embed",
    "EMBED_AT_RULES",
    "VENDOR_ALLOWLIST",
    "EMBED_SIZE_ERROR_BYTES",
    "EMBED_SIZE_WARNING_BYTES",
]

logger = logging.getLogger(__name__)

EMBED_AT_RULES = ("keyframes", "font-face", "supports", "layer", "charset", "import", "namespace")

VENDOR_ALLOWLIST = (
    "-webkit-background-clip",
    "-webkit-text-fill-color",
    "-webkit-overflow-scrolling",
    "-webkit-tap-highlight-color",
    "-webkit-font-smoothing",
    "-moz-osx-font-smoothing",
    "-webkit-appearance",
    "-moz-appearance",
    "-webkit-mask",
    "-webkit-mask-image",
    "backdrop-filter",
)

EMBED_SIZE_ERROR_BYTES = 50 * 1024
EMBED_SIZE_WARNING_BYTES = 40 * 1024

# Legacy single-colon pseudo-elements.
_LEGACY_PSEUDO_ELEMENTS = ("before", "after", "first-letter", "first-line")

_DESCENDANT_RE = re.compile(r"[^\s>+~,]\s+[^\s>+~,]")
_COMPOUND_RE = re.compile(r"\.-?[a-zA-Z_][\w-]*\.-?[a-zA-Z_][\w-]*")
_PSEUDO_ELEMENT_RE = re.compile(r"::(-?[\w-]+)")
_PSEUDO_CLASS_RE = re.compile(r"(?<!:):([\w-]+\(?)")
_ATTRIBUTE_RE = re.compile(r"\[[^\]]*\]")
_COMBINATOR_RE = re.compile(r"[>+~]")
_ID_RE = re.compile(r"#-?[a-zA-Z_][\w-]*")
_TAG_HEAD_RE = re.compile(r"^(\*|[a-zA-Z][\w-]*)")

_BREAKPOINT_LABELS = {
    "medium": ("Tablet", "max-width: 991px"),
    "small": ("Mobile Landscape", "max-width: 767px"),
    "tiny": ("Mobile Portrait", "max-width: 479px"),
    "xlarge": ("Large", "min-width: 1280px"),
    "xxlarge": ("XLarge", "min-width: 1440px"),
    "xxxlarge": ("XXLarge", "min-width: 1920px"),
}


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def _outside_groups(selector: str) -> str:
    """Drop ``(...)`` and ``[...]`` contents so combinator checks skip them."""
    out: list[str] = []
    depth = 0
    for ch in selector:
        if ch in "([":
            if not depth:
                out.append(ch)
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
            if not depth:
                out.append(ch)
        elif not depth:
            out.append(ch)
    return "".join(out)


def _classify_part(part: str) -> list[RoutingReason]:
    reasons: list[RoutingReason] = []
    flat = _outside_groups(part.strip())

    if _DESCENDANT_RE.search(flat):
        reasons.append(RoutingReason(ReasonKind.DESCENDANT_SELECTOR, "Descendant selector (.parent .child)"))
    if _COMPOUND_RE.search(flat):
        reasons.append(RoutingReason(ReasonKind.COMPOUND_SELECTOR, "Compound selector (.class1.class2)"))

    for name in _PSEUDO_ELEMENT_RE.findall(flat):
        reasons.append(RoutingReason(ReasonKind.PSEUDO_ELEMENT, f"::{name} pseudo-element"))
    states = 0
    for name in _PSEUDO_CLASS_RE.findall(flat):
        lowered = name.lower()
        bare = lowered.rstrip("(")
        if bare in _LEGACY_PSEUDO_ELEMENTS:
            reasons.append(RoutingReason(ReasonKind.PSEUDO_ELEMENT, f":{lowered} pseudo-element"))
        elif bare not in PSEUDO_VARIANTS:
            label = f":{lowered})" if lowered.endswith("(") else f":{lowered}"
            reasons.append(RoutingReason(ReasonKind.COMPLEX_PSEUDO_CLASS, f"{label} selector"))
        else:
            states += 1
    # A style variant holds a single state.
    if states > 1:
        reasons.append(RoutingReason(ReasonKind.COMPLEX_PSEUDO_CLASS, "Stacked pseudo-classes"))

    if _ATTRIBUTE_RE.search(part):
        reasons.append(RoutingReason(ReasonKind.ATTRIBUTE_SELECTOR, "Attribute selector"))

    for symbol in dict.fromkeys(_COMBINATOR_RE.findall(flat)):
        label = {">": "Child", "+": "Adjacent sibling", "~": "General sibling"}[symbol]
        reasons.append(RoutingReason(ReasonKind.COMBINATOR, f"{label} combinator ({symbol})"))

    if _ID_RE.search(flat):
        reasons.append(RoutingReason(ReasonKind.ID_SELECTOR, "ID selector"))

    if "." not in flat:
        head = _TAG_HEAD_RE.match(part.strip())
        if head:
            tag = head.group(1).lower()
            label = "html/body element selector" if tag in ("html", "body") else "Pure element selector"
            reasons.append(RoutingReason(ReasonKind.BARE_TAG_SELECTOR, label))
    return reasons


def classify_selector(selector: str) -> RoutingDecision:
    """Decide whether *selector* can become a native style.

    Comma-separated lists embed if any member does; every reason found is
    recorded once, in check order.
    """
    reasons: dict[RoutingReason, None] = {}
    for part in split_top_level(selector, ","):
        for reason in _classify_part(part):
            reasons.setdefault(reason, None)
    return RoutingDecision(selector.strip(), bool(reasons), tuple(reasons))


def classify_declarations(body: str) -> list[RoutingReason]:
    """Vendor-prefixed declarations that must stay in the embed block."""
    reasons: list[RoutingReason] = []
    for name, _value in split_declarations(body):
        if name in VENDOR_ALLOWLIST:
            reasons.append(RoutingReason(ReasonKind.VENDOR_PREFIX, f"Vendor-prefixed property: {name}"))
        elif name.startswith(("-webkit-", "-moz-", "-ms-")):
            reasons.append(RoutingReason(ReasonKind.VENDOR_PREFIX, f"Vendor prefix: {name}"))
    return reasons


def _decide(rule: CssRuleBlock, breakpoint: str | None = None) -> RoutingDecision:
    decision = classify_selector(rule.selector)
    reasons = decision.reasons + tuple(classify_declarations(rule.body))
    return RoutingDecision(decision.selector, bool(reasons), reasons, breakpoint)


# ---------------------------------------------------------------------------
# Embed formatting
# ---------------------------------------------------------------------------


def _rule_text(selector: str, body: str) -> str:
    return f"{selector} {{ {body.strip()} }}"


def format_embed(buckets: Mapping[str, list[str]], at_rules: list[str]) -> str:
    """Lay out embed rules as comment-labelled sections, at-rules first."""
    parts: list[str] = []
    if at_rules:
        parts.extend(["/* At-rules */", *at_rules, ""])
    if buckets.get("base"):
        parts.extend(["/* Base styles */", *buckets["base"], ""])
    for bp in BREAKPOINT_ORDER[1:]:
        rules = buckets.get(bp)
        if not rules:
            continue
        label, query = _BREAKPOINT_LABELS[bp]
        parts.append(f"/* {label} ({query}) */")
        parts.append(f"@media ({query}) {{")
        parts.extend(f"  {r}" for r in rules)
        parts.extend(["}", ""])
    return "\n".join(parts).strip()


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------


def _resolve_native_body(
    selector: str,
    body: str,
    variables: Mapping[str, str],
    warnings: list[RouterWarning],
) -> str:
    declarations: list[str] = []
    for name, value in split_declarations(body):
        if name.startswith("--"):
            declarations.append(f"{name}: {value};")
            continue
        resolution = resolve_value(value, variables, name)
        if resolution.has_unresolved:
            warnings.append(
                RouterWarning(
                    "variable_unresolved",
                    f"Unresolved CSS variable in: {name}: {value}",
                    Severity.WARNING,
                    selector,
                )
            )
        declarations.append(f"{name}: {resolution.value};")
    return " ".join(declarations)


def route_css(source: str, variables: Mapping[str, str] | None = None) -> RoutingResult:
    """Split *source* into native CSS and a minified embed block.

    Args:
        source: Raw stylesheet text.
        variables: Custom properties for native ``var()`` resolution. Defaults
            to the variables declared in *source*.
    """
    if variables is None:
        variables = extract_variables(source)

    warnings: list[RouterWarning] = []
    decisions: list[RoutingDecision] = []
    at_rules: list[str] = []
    at_rule_counts: dict[str, int] = {}
    buckets: dict[str, list[str]] = {bp: [] for bp in BREAKPOINT_ORDER}
    native_rules: list[str] = []
    native_media: list[str] = []
    saw_root = False

    def route_rule(rule: CssRuleBlock, bucket: str, query: str | None = None) -> None:
        decision = _decide(rule, None if bucket == "base" else bucket)
        decisions.append(decision)
        logger.debug("Route %r -> %s %s", rule.selector, "embed" if decision.needs_embed else "native", decision.reason or "")
        if decision.needs_embed:
            text = _rule_text(rule.selector, rule.body)
            if query is not None and bucket == "base":
                # Standard query with no bucket of its own keeps its wrapper.
                text = f"@media {query} {{ {text} }}"
            buckets[bucket].append(text)
            warnings.append(
                RouterWarning("selector_complex", decision.reason or "Complex selector/property", Severity.INFO, rule.selector)
            )
            return
        body = _resolve_native_body(rule.selector, rule.body, variables, warnings)
        text = _rule_text(rule.selector, body)
        if query is None:
            native_rules.append(text)
        else:
            native_media.append(f"@media {query} {{ {text} }}")

    for block in tokenize_css(source):
        if isinstance(block, CssAtBlock) and block.name != "media":
            at_rules.append(block.raw)
            at_rule_counts[block.name] = at_rule_counts.get(block.name, 0) + 1
            decisions.append(
                RoutingDecision(
                    f"@{block.name} {block.prelude}".strip(),
                    True,
                    (RoutingReason(ReasonKind.AT_RULE, f"@{block.name} rule"),),
                )
            )
            continue

        if isinstance(block, CssAtBlock):
            classification = classify_media(block.prelude)
            if not classification.is_standard:
                at_rules.append(block.raw)
                decisions.append(
                    RoutingDecision(
                        f"@media {block.prelude}",
                        True,
                        (RoutingReason(ReasonKind.NON_STANDARD_MEDIA, f"Non-standard media query: {block.prelude}"),),
                    )
                )
                warnings.append(
                    RouterWarning(
                        "at_rule_extracted",
                        f"Non-standard media query moved to embed: {block.prelude}",
                        Severity.WARNING,
                    )
                )
                continue
            bucket = classification.breakpoint or "base"
            if classification.kind is MediaKind.MAX_WIDTH and classification.breakpoint is None:
                logger.warning("Media query has no breakpoint variant: %s", block.prelude)
            for inner in tokenize_css(block.body or ""):
                if isinstance(inner, CssRuleBlock):
                    route_rule(inner, bucket, block.prelude)
                else:
                    # Nested at-rules inside a media block are kept verbatim.
                    at_rules.append(f"@media {block.prelude} {{ {inner.raw} }}")
                    at_rule_counts[inner.name] = at_rule_counts.get(inner.name, 0) + 1
            continue

        if any(part.strip().lower() == ":root" for part in split_top_level(block.selector, ",")):
            at_rules.append(_rule_text(block.selector, block.body))
            saw_root = True
            decisions.append(
                RoutingDecision(
                    block.selector.strip(),
                    True,
                    (RoutingReason(ReasonKind.ROOT_VARIABLES, ":root CSS variables"),),
                )
            )
            continue

        route_rule(block, "base")

    for name, count in at_rule_counts.items():
        if name in EMBED_AT_RULES:
            reason = f"@{name} rules moved to embed ({count} found)"
        else:
            reason = f"Unrecognised @{name} rules moved to embed ({count} found)"
        warnings.append(RouterWarning("at_rule_extracted", reason, Severity.INFO))
    if saw_root:
        warnings.append(RouterWarning("at_rule_extracted", ":root CSS variables moved to embed", Severity.INFO))

    embed = minify_css(format_embed(buckets, at_rules))
    size = len(embed.encode("utf-8"))
    if size > EMBED_SIZE_ERROR_BYTES:
        warnings.append(
            RouterWarning(
                "size_error",
                f"Embed CSS exceeds 50KB limit ({round(size / 1024)}KB). Consider splitting into multiple embeds.",
                Severity.ERROR,
            )
        )
    elif size > EMBED_SIZE_WARNING_BYTES:
        warnings.append(
            RouterWarning(
                "size_warning",
                f"Embed CSS is large ({round(size / 1024)}KB). May impact page performance.",
                Severity.WARNING,
            )
        )

    embed_rules = sum(len(rules) for rules in buckets.values())
    native_count = len(native_rules) + len(native_media)
    stats = RoutingStats(
        total_rules=native_count + embed_rules,
        native_rules=native_count,
        embed_rules=embed_rules,
        at_rules_extracted=len(at_rules),
        embed_size_bytes=size,
    )
    return RoutingResult(
        native="\n".join(native_rules + native_media),
        embed=embed,
        decisions=decisions,
        warnings=warnings,
        stats=stats,
    )
