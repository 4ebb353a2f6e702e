"""Diagnostic rules comparing the emitted graph against its source.

Each rule is a function taking a :class:`DiagnosticContext` and returning a
list of :class:`Diagnostic` objects. The ``message`` of every diagnostic is
the exact entry that lands in the matching :class:`DiagnosticReport` list.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

from flowbridge.css.model import ClassIndex
from flowbridge.diagnostics.model import Diagnostic, Severity
from flowbridge.graph.builder import DROP_TAGS, GRID_MARKER_CLASS, normalize_tag
from flowbridge.graph.model import TargetStyle, XscpPayload
from flowbridge.html.model import MarkupAnalysis
from flowbridge.html.parser import analyze_markup
from flowbridge.styleless import get_property, parse_style_less

__all__ = [
    "FONT_FALLBACKS",
    "SPACING_PROPERTIES",
    "LAYOUT_PROPERTIES",
    "DiagnosticContext",
    "element_signature",
    "is_fallback_font",
    "check_missing_fonts",
    "check_layout_degradation",
    "check_missing_spacing",
    "check_orphans",
    "check_phantoms",
    "ALL_RULES",
]


# ---------------------------------------------------------------------------
# Known value sets
# ---------------------------------------------------------------------------

FONT_FALLBACKS = ("arial", "sans-serif", "serif", "system-ui")

SPACING_PROPERTIES = frozenset({
    "gap",
    "row-gap",
    "column-gap",
    "padding",
    "padding-top",
    "padding-right",
    "padding-bottom",
    "padding-left",
    "margin",
    "margin-top",
    "margin-right",
    "margin-bottom",
    "margin-left",
    "min-width",
    "min-height",
    "max-width",
    "max-height",
    "width",
    "height",
})

LAYOUT_PROPERTIES = frozenset({
    "display",
    "flex-direction",
    "flex-wrap",
    "justify-content",
    "align-items",
    "align-content",
    "grid-template-columns",
    "grid-template-rows",
    "grid-column",
    "grid-row",
    "gap",
    "row-gap",
    "column-gap",
})

_FLEX_REQUIRED = ("display", "flex-direction", "justify-content", "align-items")
_GRID_REQUIRED = ("display", "grid-template-columns")


@dataclass
class DiagnosticContext:
    """Everything the rules compare.

    ``normalized_html`` is the markup after any upstream normaliser ran;
    classes present there but not in ``original_html`` count as injected
    and are ignored when matching elements. Defaults to ``original_html``.
    """

    original_html: str
    payload: XscpPayload
    class_index: ClassIndex
    normalized_html: str | None = None

    @cached_property
    def original(self) -> MarkupAnalysis:
        return analyze_markup(self.original_html)

    @cached_property
    def normalized(self) -> MarkupAnalysis:
        if self.normalized_html is None:
            return self.original
        return analyze_markup(self.normalized_html)

    @cached_property
    def injected_classes(self) -> frozenset[str]:
        return frozenset(c for c in self.normalized.classes if c not in self.original.classes)

    @cached_property
    def styles_by_class(self) -> dict[str, TargetStyle]:
        return {style.name: style for style in self.payload.styles}

    def emitted_props(self, class_name: str) -> dict[str, str]:
        style = self.styles_by_class.get(class_name)
        return parse_style_less(style.style_less) if style else {}


def element_signature(tag: str, classes: list[str] | tuple[str, ...]) -> str:
    return f"{tag}|{'.'.join(sorted(classes))}"


def is_fallback_font(actual: str, expected: str) -> bool:
    """True when *actual* degraded to a generic family *expected* never asked for."""
    actual_lower = actual.lower()
    expected_lower = expected.lower()
    if actual_lower == expected_lower:
        return False
    uses_fallback = any(f in actual_lower for f in FONT_FALLBACKS)
    expected_has_fallback = any(f in expected_lower for f in FONT_FALLBACKS)
    return uses_fallback and not expected_has_fallback


def _source_entries(ctx: DiagnosticContext):
    """Index entries for classes the markup uses and that declare base styles."""
    for class_name, entry in ctx.class_index.classes.items():
        if class_name in ctx.normalized.classes and entry.base_styles:
            yield class_name, entry


# ---------------------------------------------------------------------------
# Style rules
# ---------------------------------------------------------------------------


def check_missing_fonts(ctx: DiagnosticContext) -> list[Diagnostic]:
    """A declared font-family must survive without degrading to a fallback."""
    diagnostics: list[Diagnostic] = []
    for class_name, entry in _source_entries(ctx):
        expected = get_property(entry.base_styles, "font-family")
        if not expected:
            continue
        actual = ctx.emitted_props(class_name).get("font-family")
        if not actual or is_fallback_font(actual, expected):
            diagnostics.append(
                Diagnostic(
                    rule="check_missing_fonts",
                    severity=Severity.WARNING,
                    message=f".{class_name} missing font-family (expected {expected})",
                    class_name=class_name,
                    fix=f"Set font-family: {expected}; on .{class_name}.",
                )
            )
    return diagnostics


def check_layout_degradation(ctx: DiagnosticContext) -> list[Diagnostic]:
    """Flex and grid containers must keep their structural properties."""
    diagnostics: list[Diagnostic] = []
    for class_name, entry in _source_entries(ctx):
        if not entry.is_layout_container:
            continue
        actual = ctx.emitted_props(class_name)
        expected = parse_style_less(entry.base_styles)
        display = (actual.get("display") or expected.get("display") or "").lower()

        for kind, required in (("flex", _FLEX_REQUIRED), ("grid", _GRID_REQUIRED)):
            if kind not in display:
                continue
            missing = [prop for prop in required if prop not in actual]
            if missing:
                diagnostics.append(
                    Diagnostic(
                        rule="check_layout_degradation",
                        severity=Severity.ERROR,
                        message=f".{class_name} missing {kind} props: {', '.join(missing)}",
                        class_name=class_name,
                    )
                )
    return diagnostics


def check_missing_spacing(ctx: DiagnosticContext) -> list[Diagnostic]:
    """Spacing and sizing declared in the source must be emitted."""
    diagnostics: list[Diagnostic] = []
    for class_name, entry in _source_entries(ctx):
        actual = ctx.emitted_props(class_name)
        for prop in parse_style_less(entry.base_styles):
            if prop in SPACING_PROPERTIES and prop not in actual:
                diagnostics.append(
                    Diagnostic(
                        rule="check_missing_spacing",
                        severity=Severity.WARNING,
                        message=f".{class_name} missing {prop}",
                        class_name=class_name,
                    )
                )
    return diagnostics


# ---------------------------------------------------------------------------
# Structural rules
# ---------------------------------------------------------------------------


def check_orphans(ctx: DiagnosticContext) -> list[Diagnostic]:
    """Every referenced class needs a style and every child id a node."""
    diagnostics: list[Diagnostic] = []
    referenced: dict[str, None] = {}
    for node in ctx.payload.element_nodes():
        for cls in node.classes:
            referenced.setdefault(cls, None)
    for cls in referenced:
        if cls == GRID_MARKER_CLASS or cls in ctx.styles_by_class:
            continue
        diagnostics.append(
            Diagnostic(
                rule="check_orphans",
                severity=Severity.ERROR,
                message=f".{cls}",
                class_name=cls,
                fix=f"Define a style for .{cls} or remove it from its nodes.",
            )
        )

    node_ids = {node.id for node in ctx.payload.nodes}
    for node in ctx.payload.nodes:
        for child_id in node.children:
            if child_id not in node_ids:
                diagnostics.append(
                    Diagnostic(
                        rule="check_orphans",
                        severity=Severity.ERROR,
                        message=f"{node.id} -> missing child {child_id}",
                        node_id=node.id,
                    )
                )
    return diagnostics


def check_phantoms(ctx: DiagnosticContext) -> list[Diagnostic]:
    """Emitted elements must correspond one-to-one with source elements.

    The fragment wrapper added around several top-level nodes is exempt.
    """
    remaining: dict[str, int] = {}
    for element in ctx.original.elements:
        if element.tag in DROP_TAGS:
            continue
        signature = element_signature(normalize_tag(element.tag), element.classes)
        remaining[signature] = remaining.get(signature, 0) + 1

    ignored = ctx.injected_classes | {GRID_MARKER_CLASS}
    diagnostics: list[Diagnostic] = []
    for node in ctx.payload.element_nodes():
        if node.synthetic:
            continue
        tag = (node.tag or "div").lower()
        signature = element_signature(tag, [c for c in node.classes if c not in ignored])
        if remaining.get(signature, 0) > 0:
            remaining[signature] -= 1
            continue
        diagnostics.append(
            Diagnostic(
                rule="check_phantoms",
                severity=Severity.WARNING,
                message=f"{tag}#{node.id}",
                node_id=node.id,
                fix="Remove the node; it has no counterpart in the source markup.",
            )
        )
    return diagnostics


ALL_RULES = [
    check_missing_fonts,
    check_layout_degradation,
    check_missing_spacing,
    check_orphans,
    check_phantoms,
]
