"""Design-token payloads: utility classes built from ``:root`` variables."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from flowbridge.graph.model import NodeType, TargetNode, TargetStyle, XscpPayload
from flowbridge.styleless import split_values

__all__ = [
    "TokenType",
    "DesignToken",
    "categorize_variable",
    "extract_design_tokens",
    "to_rem",
    "scale_rem",
    "build_token_payload",
]

_LENGTH_RE = re.compile(r"^(-?\d*\.?\d+)(px|rem|em|vw|vh|%)$", re.IGNORECASE)
_REM_RE = re.compile(r"^(-?\d*\.?\d+)rem$", re.IGNORECASE)
_SPACING_VALUE_RE = re.compile(r"^\d+(\.\d+)?(px|rem|em|vw|vh|%)(\s+\d+(\.\d+)?(px|rem|em|vw|vh|%).*)?$")
_COLOR_KEYWORDS = frozenset({"transparent", "inherit", "currentcolor"})

_SPACING_NAME_HINTS = ("padding", "margin", "gap", "spacing", "section-", "page-", "container-")
_COLOR_NAME_HINTS = ("bg", "text", "border", "coral", "accent", "dark", "light", "card", "muted")
_BORDER_NAME_HINTS = ("border", "accent", "coral")

# Responsive scale applied to spacing utilities, per variant.
SPACING_SCALES: tuple[tuple[str, float], ...] = (
    ("tiny", 0.85),
    ("small", 0.9),
    ("medium", 1.0),
    ("desktop", 1.1),
)

_WRAPPER_VARIANTS = {
    "medium": "padding-left: 4vw; padding-right: 4vw;",
    "small": "padding-left: 5vw; padding-right: 5vw;",
    "tiny": "padding-left: 4vw; padding-right: 4vw;",
}
_TOKEN_GRID_STYLE = "display: flex; flex-wrap: wrap; gap: 1rem; padding: 2rem;"


class TokenType(Enum):
    COLOR = "color"
    FONT_FAMILY = "fontFamily"
    SPACING = "spacing"


@dataclass(frozen=True)
class DesignToken:
    name: str
    value: str
    type: TokenType

    @property
    def css_var(self) -> str:
        return f"--{self.name}"


def _is_spacing_value(value: str) -> bool:
    return bool(_SPACING_VALUE_RE.match(value.strip().lower()))


def _is_color_value(value: str) -> bool:
    v = value.strip().lower()
    return v.startswith(("#", "rgb", "hsl", "oklch", "var(--")) or v in _COLOR_KEYWORDS


def categorize_variable(name: str, value: str) -> TokenType | None:
    """Classify a custom property by name first, then by value shape.

    *name* is given without the leading ``--``. Returns None for variables
    that are not design tokens.
    """
    lower = name.lower()
    if lower.startswith("font-"):
        return TokenType.FONT_FAMILY
    if any(hint in lower for hint in _SPACING_NAME_HINTS) or _is_spacing_value(value):
        return TokenType.SPACING
    if _is_color_value(value) or any(hint in lower for hint in _COLOR_NAME_HINTS):
        return TokenType.COLOR
    return None


def extract_design_tokens(variables: Mapping[str, str], raw: Mapping[str, str] | None = None) -> list[DesignToken]:
    """Categorise variables into tokens, skipping ``radius-*`` and unknown ones.

    Classification looks at the *raw* declared value (so ``var(--x)``
    aliases count as colours) while the token carries the resolved value.
    """
    raw = raw if raw is not None else variables
    tokens: list[DesignToken] = []
    for css_var, value in variables.items():
        name = css_var[2:] if css_var.startswith("--") else css_var
        if name.startswith("radius-"):
            continue
        token_type = categorize_variable(name, raw.get(css_var, value))
        if token_type is not None:
            tokens.append(DesignToken(name, value.strip(), token_type))
    return tokens


def _format_number(num: float) -> str:
    text = f"{num:.4f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def to_rem(value: str) -> str:
    """Convert px lengths to rem (16px base); other units are kept."""
    converted: list[str] = []
    for part in split_values(value):
        match = _LENGTH_RE.match(part)
        if not match:
            converted.append(part)
            continue
        num, unit = float(match.group(1)), match.group(2).lower()
        if unit == "px":
            converted.append(f"{_format_number(num / 16)}rem")
        elif unit == "rem":
            converted.append(f"{_format_number(num)}rem")
        else:
            converted.append(part)
    return " ".join(converted)


def scale_rem(value: str, factor: float) -> str:
    scaled: list[str] = []
    for part in split_values(value):
        match = _REM_RE.match(part)
        scaled.append(f"{_format_number(float(match.group(1)) * factor)}rem" if match else part)
    return " ".join(scaled)


def _block(node_id: str, classes: list[str], children: list[str]) -> TargetNode:
    return TargetNode(
        id=node_id,
        type=NodeType.BLOCK,
        tag="div",
        classes=classes,
        children=children,
        data={"tag": "div", "text": False},
    )


def _spacing_style(name: str, prop: str, value: str) -> TargetStyle:
    style = TargetStyle(name, f"{prop}: {value};")
    for variant, factor in SPACING_SCALES:
        style.variants[variant] = f"{prop}: {scale_rem(value, factor)};"
    return style


def build_token_payload(
    variables: Mapping[str, str],
    namespace: str = "fp",
    raw: Mapping[str, str] | None = None,
) -> XscpPayload:
    """Build the token payload: utility classes plus a small preview tree.

    The ``{namespace}-page-wrapper`` class carries the page margins and is
    meant to wrap all page content.
    """
    tokens = extract_design_tokens(variables, raw)
    colors = [t for t in tokens if t.type is TokenType.COLOR and t.value]
    fonts = [t for t in tokens if t.type is TokenType.FONT_FAMILY and t.value]
    spacing = [t for t in tokens if t.type is TokenType.SPACING]

    main_bg = next(
        (t for t in colors if t.css_var in ("--light-bg", "--dark-bg") or "page-bg" in t.name),
        None,
    )
    page_padding = next(
        (t for t in spacing if any(k in t.name for k in ("page-padding", "section-padding", "container-padding"))),
        None,
    )
    page_margin = next(
        (t for t in spacing if "page-margin" in t.name or "section-margin" in t.name),
        None,
    )
    padding_x = page_padding.value if page_padding else "5vw"
    padding_y = page_margin.value if page_margin else "0"

    wrapper_class = f"{namespace}-page-wrapper"
    wrapper_decls = [
        f"padding-left: {padding_x};",
        f"padding-right: {padding_x};",
        f"padding-top: {padding_y};",
        f"padding-bottom: {padding_y};",
        "width: 100%;",
        "min-height: 100vh;",
    ]
    if main_bg is not None:
        wrapper_decls.append(f"background-color: {main_bg.value};")
    styles = [TargetStyle(wrapper_class, " ".join(wrapper_decls), variants=dict(_WRAPPER_VARIANTS))]

    for token in colors:
        styles.append(TargetStyle(f"{namespace}-bg-{token.name}", f"background-color: {token.value};"))
        styles.append(TargetStyle(f"{namespace}-text-{token.name}", f"color: {token.value};"))
        if any(hint in token.name for hint in _BORDER_NAME_HINTS):
            styles.append(TargetStyle(f"{namespace}-border-{token.name}", f"border-color: {token.value};"))

    for token in spacing:
        value = to_rem(token.value)
        if not value:
            continue
        styles.append(_spacing_style(f"{namespace}-p-{token.name}", "padding", value))
        styles.append(_spacing_style(f"{namespace}-m-{token.name}", "margin", value))
        styles.append(_spacing_style(f"{namespace}-gap-{token.name}", "gap", value))

    for token in fonts:
        styles.append(TargetStyle(f"{namespace}-{token.name}", f"font-family: {token.value};"))

    styles.append(TargetStyle(f"{namespace}-token-grid", _TOKEN_GRID_STYLE))

    # Preview: page wrapper > (instruction, token grid > swatches).
    leaf_nodes: list[TargetNode] = []
    swatch_ids: list[str] = []
    for token in colors:
        label_id = f"{namespace}-label-{token.name}"
        swatch_id = f"{namespace}-swatch-{token.name}"
        leaf_nodes.append(_block(swatch_id, [f"{namespace}-bg-{token.name}"], [label_id]))
        leaf_nodes.append(TargetNode.text_node(label_id, token.name))
        swatch_ids.append(swatch_id)
    for token in fonts:
        text_id = f"{namespace}-font-text-{token.name}"
        sample_id = f"{namespace}-font-sample-{token.name}"
        leaf_nodes.append(_block(sample_id, [f"{namespace}-{token.name}"], [text_id]))
        leaf_nodes.append(TargetNode.text_node(text_id, f"{token.name}: {token.value}"))
        swatch_ids.append(sample_id)

    instruction_text_id = f"{namespace}-instruction-text"
    instruction_id = f"{namespace}-instruction"
    grid_id = f"{namespace}-token-grid"
    nodes = [
        _block(f"{namespace}-page-wrapper-demo", [wrapper_class], [instruction_id, grid_id]),
        _block(instruction_id, [], [instruction_text_id]),
        TargetNode.text_node(
            instruction_text_id,
            f"Design Tokens - Use {wrapper_class} to wrap your page content for consistent margins",
        ),
        _block(grid_id, [f"{namespace}-token-grid"], swatch_ids),
        *leaf_nodes,
    ]
    return XscpPayload(nodes=nodes, styles=styles)
