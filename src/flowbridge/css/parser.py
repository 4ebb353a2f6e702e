"""Build the class index from a stylesheet.

Rules are keyed by the class their selector targets. Pseudo-classes become
state variants, ``max-width`` media blocks become breakpoint variants and
mobile-first ``min-width`` blocks are promoted into the desktop base with
the previous values backfilled into the smaller breakpoints.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Mapping

from flowbridge.css.lexer import CssAtBlock, CssBlock, CssRuleBlock, tokenize_css
from flowbridge.css.media import MediaKind, classify_media
from flowbridge.css.model import (
    PSEUDO_VARIANTS,
    ClassIndex,
    ClassIndexEntry,
    CssWarning,
    ParsedStylesheet,
    WarningKind,
)
from flowbridge.css.properties import (
    ELEMENT_SPACING_PROPERTIES,
    TYPOGRAPHY_PROPERTIES,
    normalize_declarations,
)
from flowbridge.css.variables import extract_variables
from flowbridge.styleless import (
    merge_preserve_existing,
    merge_style_less,
    parse_style_less,
    split_top_level,
    to_style_less,
)

__all__ = [
    "parse_css",
    "parse_selector",
    "SelectorInfo",
    "ELEMENT_CLASS_MAP",
    "STRUCTURAL_ELEMENTS",
]

logger = logging.getLogger(__name__)

# Bare element selectors whose styles are carried over to canonical classes.
ELEMENT_CLASS_MAP = {
    "body": "wf-body",
    "h1": "heading-h1",
    "h2": "heading-h2",
    "h3": "heading-h3",
    "h4": "heading-h4",
    "h5": "heading-h5",
    "h6": "heading-h6",
    "p": "text-body",
    "a": "link",
    "section": "wf-section",
    "nav": "wf-nav",
    "header": "wf-header",
    "footer": "wf-footer",
    "main": "wf-main",
    "article": "wf-article",
    "aside": "wf-aside",
}

STRUCTURAL_ELEMENTS = frozenset({"section", "nav", "header", "footer", "main", "article", "aside"})
_TYPOGRAPHY_ELEMENTS = frozenset({"body", "h1", "h2", "h3", "h4", "h5", "h6", "p", "a"})

_LAYOUT_DISPLAYS = frozenset({"flex", "inline-flex", "grid", "inline-grid"})

_CLASS_RE = re.compile(r"\.(-?[a-zA-Z_][\w-]*)")
_PSEUDO_RE = re.compile(r"(::?)([a-zA-Z-]+)(\([^)]*\))?")

# Mobile-first thresholds: rules at or above the width are promoted into base,
# and the old base values move into these breakpoints.
_BACKFILL_BREAKPOINTS: tuple[tuple[float, tuple[str, ...]], ...] = (
    (992, ("medium", "small", "tiny")),
    (768, ("small", "tiny")),
    (480, ("tiny",)),
)


# ---------------------------------------------------------------------------
# Selector analysis
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SelectorInfo:
    """What a single (comma-free) selector targets."""

    class_name: str | None
    pseudo: str | None = None
    unsupported: str | None = None
    is_combo: bool = False
    combo_parent: str | None = None
    parent_classes: tuple[str, ...] = ()

    @property
    def is_descendant(self) -> bool:
        return bool(self.parent_classes)


def _compounds(selector: str) -> list[str]:
    """Split a selector into compound selectors at combinators.

    Combinators inside parentheses or attribute brackets are not split on.
    """
    compounds: list[str] = []
    current: list[str] = []
    depth = 0
    for ch in selector.strip():
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif depth == 0 and (ch.isspace() or ch in ">+~"):
            if current:
                compounds.append("".join(current))
                current = []
            continue
        current.append(ch)
    if current:
        compounds.append("".join(current))
    return compounds


def parse_selector(selector: str) -> SelectorInfo:
    compounds = _compounds(selector)
    if not compounds:
        return SelectorInfo(None)
    target = compounds[-1]
    if "[" in target:
        return SelectorInfo(None, unsupported="attribute selector")

    pseudo: str | None = None
    pseudos = _PSEUDO_RE.findall(target)
    if pseudos:
        colons, name, _args = pseudos[-1]
        name = name.lower()
        if len(pseudos) > 1 or colons == "::" or name not in PSEUDO_VARIANTS:
            return SelectorInfo(None, unsupported=f"{colons}{name}")
        pseudo = PSEUDO_VARIANTS[name]

    classes = _CLASS_RE.findall(_PSEUDO_RE.sub("", target))
    if not classes:
        return SelectorInfo(None)

    parents: list[str] = []
    for compound in compounds[:-1]:
        for cls in _CLASS_RE.findall(compound):
            if cls not in parents:
                parents.append(cls)

    return SelectorInfo(
        class_name=classes[-1],
        pseudo=pseudo,
        is_combo=len(classes) > 1,
        combo_parent=classes[-2] if len(classes) > 1 else None,
        parent_classes=tuple(parents),
    )


# ---------------------------------------------------------------------------
# Index builder
# ---------------------------------------------------------------------------


@dataclass
class _IndexBuilder:
    variables: Mapping[str, str]
    classes: dict[str, ClassIndexEntry] = field(default_factory=dict)
    warnings: list[CssWarning] = field(default_factory=list)

    def entry(self, class_name: str) -> ClassIndexEntry:
        if class_name not in self.classes:
            self.classes[class_name] = ClassIndexEntry(class_name=class_name)
        return self.classes[class_name]

    def _link(self, info: SelectorInfo, entry: ClassIndexEntry) -> None:
        if info.combo_parent:
            entry.is_combo_class = True
            entry.parent_class = info.combo_parent
            parent = self.entry(info.combo_parent)
            if entry.class_name not in parent.children:
                parent.children.append(entry.class_name)
        for parent_name in info.parent_classes:
            if parent_name not in entry.parent_classes:
                entry.parent_classes.append(parent_name)
            parent = self.entry(parent_name)
            if entry.class_name not in parent.children:
                parent.children.append(entry.class_name)

    def _target(self, selector: str) -> SelectorInfo | None:
        info = parse_selector(selector)
        if info.unsupported:
            self.warnings.append(
                CssWarning(
                    WarningKind.UNSUPPORTED_SELECTOR,
                    f"Selector {selector!r} uses {info.unsupported} and is left out of the class index",
                    selector=selector,
                )
            )
            return None
        return info if info.class_name else None

    def add_rule(self, selector: str, body: str, breakpoint: str | None = None) -> None:
        info = self._target(selector)
        if info is None:
            return
        props = normalize_declarations(body, self.variables, self.warnings, selector)
        if not props:
            return

        entry = self.entry(info.class_name)  # type: ignore[arg-type]
        entry.selectors.append(selector)
        if props.get("display", "").lower() in _LAYOUT_DISPLAYS:
            entry.is_layout_container = True
        self._link(info, entry)

        if info.is_descendant and breakpoint is None and info.pseudo is None:
            self.warnings.append(
                CssWarning(
                    WarningKind.COMPLEX_SELECTOR,
                    f'Descendant selector "{selector}" flattened to .{entry.class_name}. '
                    f"Parent context from .{', .'.join(info.parent_classes)} may be lost.",
                    selector=selector,
                )
            )

        style_less = to_style_less(props)
        if breakpoint and info.pseudo:
            key = f"{breakpoint}_{info.pseudo}"
        else:
            key = breakpoint or info.pseudo
        if key is None:
            entry.base_styles = merge_style_less(entry.base_styles, style_less)
        else:
            entry.variants[key] = merge_style_less(entry.variants.get(key), style_less)

    def promote_min_width(self, selector: str, body: str, min_width: float) -> None:
        """Apply a mobile-first rule: promote into base, backfill old values."""
        info = self._target(selector)
        if info is None or info.pseudo:
            return
        props = normalize_declarations(body, self.variables, self.warnings, selector)
        if not props:
            return

        entry = self.entry(info.class_name)  # type: ignore[arg-type]
        entry.selectors.append(selector)
        if props.get("display", "").lower() in _LAYOUT_DISPLAYS:
            entry.is_layout_container = True
        self._link(info, entry)

        targets: tuple[str, ...] = ()
        for threshold, breakpoints in _BACKFILL_BREAKPOINTS:
            if min_width >= threshold:
                targets = breakpoints
                break

        base = parse_style_less(entry.base_styles)
        for prop, value in props.items():
            previous = base.get(prop)
            if previous and targets:
                backfill = f"{prop}: {previous};"
                for bp in targets:
                    entry.variants[bp] = merge_preserve_existing(entry.variants.get(bp), backfill)
            base[prop] = value
        entry.base_styles = to_style_less(base)

    # ---- element selectors ----

    def merge_element_styles(self, element_styles: dict[str, dict[str, str]]) -> None:
        """Fold bare element styles into their canonical classes; class values win."""
        for element, props in element_styles.items():
            class_name = ELEMENT_CLASS_MAP[element]
            style_less = to_style_less(props)
            if class_name not in self.classes:
                logger.info("Created .%s from %s selector: %s", class_name, element, style_less)
                entry = self.entry(class_name)
                entry.selectors.append(f".{class_name}")
                entry.base_styles = style_less
            else:
                entry = self.classes[class_name]
                entry.base_styles = merge_preserve_existing(entry.base_styles, style_less)

    # ---- layout defaults ----

    def enforce_layout_defaults(self) -> None:
        for entry in self.classes.values():
            if not entry.is_layout_container or not entry.base_styles:
                continue
            props = parse_style_less(entry.base_styles)
            display = props.get("display", "").lower()
            added: list[str] = []

            def inject(prop: str, value: str) -> None:
                props[prop] = value
                added.append(f"{prop}: {value}")

            if display in ("flex", "inline-flex"):
                if "flex-direction" not in props:
                    inject("flex-direction", "row")
                if "justify-content" not in props:
                    inject("justify-content", "flex-start")
                if "align-items" not in props:
                    inject("align-items", "stretch")

            if display in ("grid", "inline-grid"):
                has_template = any(
                    p in props
                    for p in ("grid-template-columns", "grid-template-rows", "grid-auto-columns", "grid-auto-rows")
                )
                if not has_template:
                    inject("grid-template-columns", "1fr")
                if (
                    "grid-template-columns" in props
                    and "grid-template-rows" not in props
                    and "grid-auto-rows" not in props
                ):
                    inject("grid-template-rows", "auto")
                    inject("grid-auto-rows", "auto")
                    inject("grid-auto-flow", "row")
                if "justify-items" not in props:
                    inject("justify-items", "stretch")
                if "align-items" not in props:
                    inject("align-items", "stretch")

            if added:
                entry.base_styles = to_style_less(props)
                self.warnings.append(
                    CssWarning(
                        WarningKind.COMPLEX_SELECTOR,
                        f"Layout container .{entry.class_name} missing explicit properties: "
                        f"{', '.join(added)}. Injected browser defaults.",
                        selector=f".{entry.class_name}",
                    )
                )


def _is_root_block(block: CssBlock) -> bool:
    return isinstance(block, CssRuleBlock) and block.selector.strip().lower() == ":root"


def _collect_element_styles(
    blocks: list[CssBlock],
    builder: _IndexBuilder,
) -> dict[str, dict[str, str]]:
    """Typography and spacing declared on bare element selectors."""
    styles: dict[str, dict[str, str]] = {}
    for block in blocks:
        if not isinstance(block, CssRuleBlock):
            continue
        for selector in split_top_level(block.selector, ","):
            element = selector.strip().lower()
            if element in _TYPOGRAPHY_ELEMENTS:
                wanted = TYPOGRAPHY_PROPERTIES
            elif element in STRUCTURAL_ELEMENTS:
                wanted = ELEMENT_SPACING_PROPERTIES
            else:
                continue
            props = normalize_declarations(
                block.body, builder.variables, builder.warnings, element, only=wanted
            )
            if props:
                styles.setdefault(element, {}).update(props)
    return styles


def parse_css(source: str) -> ParsedStylesheet:
    """Parse *source* into a :class:`ParsedStylesheet`."""
    variables = extract_variables(source)
    blocks = tokenize_css(source)
    builder = _IndexBuilder(variables)

    root_blocks = [b for b in blocks if _is_root_block(b)]
    other_blocks = [b for b in blocks if not _is_root_block(b)]
    tokens_css = "\n".join(b.raw for b in root_blocks)
    clean_css = "\n".join(b.raw for b in other_blocks)

    element_styles = _collect_element_styles(other_blocks, builder)

    # Base rules first so mobile-first media blocks can promote over them.
    media_blocks: list[CssAtBlock] = []
    for block in other_blocks:
        if isinstance(block, CssRuleBlock):
            for selector in split_top_level(block.selector, ","):
                builder.add_rule(selector, block.body)
        elif block.name == "media" and block.body is not None:
            media_blocks.append(block)

    for media in media_blocks:
        classification = classify_media(media.prelude)
        inner = [b for b in tokenize_css(media.body or "") if isinstance(b, CssRuleBlock)]
        if classification.breakpoint is not None:
            for rule in inner:
                for selector in split_top_level(rule.selector, ","):
                    builder.add_rule(selector, rule.body, classification.breakpoint)
        elif classification.kind is MediaKind.MIN_WIDTH and classification.width is not None:
            for rule in inner:
                for selector in split_top_level(rule.selector, ","):
                    builder.promote_min_width(selector, rule.body, classification.width)
        elif inner:
            logger.warning("Unmapped media query: %s", media.prelude)
            builder.warnings.append(
                CssWarning(WarningKind.BREAKPOINT_UNMAPPED, f"Unmapped media query: {media.prelude}")
            )

    builder.merge_element_styles(element_styles)
    builder.enforce_layout_defaults()

    return ParsedStylesheet(
        class_index=ClassIndex(builder.classes, builder.warnings),
        variables=variables,
        tokens_css=tokens_css,
        clean_css=clean_css,
    )
