"""Declaration normalisation for the class index.

Turns a raw declaration body into the longhand property set the target
style model understands: ``!important`` is dropped, motion properties are
stripped, shorthands are expanded and anything outside the supported
property list is reported and skipped.
"""

from __future__ import annotations

import re
from typing import Mapping

from flowbridge.css.lexer import split_declarations
from flowbridge.css.model import CssWarning, WarningKind
from flowbridge.css.variables import resolve_value
from flowbridge.styleless import split_values

__all__ = [
    "SUPPORTED_PROPERTIES",
    "STRIP_PROPERTIES",
    "TYPOGRAPHY_PROPERTIES",
    "ELEMENT_SPACING_PROPERTIES",
    "normalize_declarations",
    "expand_box_shorthand",
    "expand_flex",
    "expand_border",
    "parse_grid_placement",
]

SUPPORTED_PROPERTIES = frozenset({
    # layout
    "display", "flex-direction", "flex-wrap", "justify-content", "align-items", "align-content",
    "align-self", "flex", "flex-grow", "flex-shrink", "flex-basis", "order",
    "gap", "row-gap", "column-gap", "grid-row-gap", "grid-column-gap",
    "grid-template-columns", "grid-template-rows", "grid-column", "grid-row",
    "grid-column-start", "grid-column-end", "grid-row-start", "grid-row-end",
    "grid-auto-rows", "grid-auto-columns", "grid-auto-flow",
    "justify-items", "justify-self", "place-items", "place-content",
    # sizing and spacing
    "width", "height", "min-width", "max-width", "min-height", "max-height", "aspect-ratio",
    "padding", "padding-top", "padding-right", "padding-bottom", "padding-left",
    "margin", "margin-top", "margin-right", "margin-bottom", "margin-left",
    # position
    "position", "top", "right", "bottom", "left", "z-index", "float", "clear",
    # background
    "background", "background-color", "background-image", "background-size",
    "background-position", "background-repeat",
    "background-clip", "-webkit-background-clip", "-webkit-text-fill-color",
    # typography
    "color", "font-family", "font-size", "font-weight", "font-style", "line-height",
    "letter-spacing", "text-align", "text-decoration", "text-transform", "text-indent",
    "text-shadow", "white-space",
    # borders
    "border", "border-width", "border-style", "border-color",
    "border-top", "border-top-width", "border-top-style", "border-top-color",
    "border-right", "border-right-width", "border-right-style", "border-right-color",
    "border-bottom", "border-bottom-width", "border-bottom-style", "border-bottom-color",
    "border-left", "border-left-width", "border-left-style", "border-left-color",
    "border-radius", "border-top-left-radius", "border-top-right-radius",
    "border-bottom-right-radius", "border-bottom-left-radius",
    # effects
    "opacity", "box-shadow", "filter", "backdrop-filter", "mix-blend-mode",
    "overflow", "overflow-x", "overflow-y", "transform", "transform-origin",
    "visibility", "cursor", "pointer-events", "user-select",
    "list-style", "list-style-type", "list-style-position",
    "object-fit", "object-position",
    "outline", "outline-width", "outline-style", "outline-color", "outline-offset",
})

STRIP_PROPERTIES = frozenset({
    "transition", "transition-property", "transition-duration",
    "transition-timing-function", "transition-delay",
    "animation", "animation-name", "animation-duration", "animation-timing-function",
    "-webkit-transition", "-webkit-animation", "-moz-transition", "-moz-animation",
    "-webkit-font-smoothing", "-moz-osx-font-smoothing",
})

TYPOGRAPHY_PROPERTIES = (
    "font-family",
    "font-size",
    "font-weight",
    "font-style",
    "line-height",
    "letter-spacing",
    "color",
    "text-transform",
    "text-decoration",
)

ELEMENT_SPACING_PROPERTIES = frozenset({
    "padding", "padding-top", "padding-right", "padding-bottom", "padding-left",
    "margin", "margin-top", "margin-right", "margin-bottom", "margin-left",
    "gap", "row-gap", "column-gap",
})

_BOX_LONGHANDS = {
    "padding": ("padding-top", "padding-right", "padding-bottom", "padding-left"),
    "margin": ("margin-top", "margin-right", "margin-bottom", "margin-left"),
    "border-radius": (
        "border-top-left-radius",
        "border-top-right-radius",
        "border-bottom-right-radius",
        "border-bottom-left-radius",
    ),
}

_BORDER_STYLES = frozenset({
    "none", "hidden", "dotted", "dashed", "solid", "double", "groove", "ridge", "inset", "outset",
})

_IMPORTANT_RE = re.compile(r"\s*!important\s*$", re.IGNORECASE)
_NUMBER_RE = re.compile(r"^-?\d*\.?\d+$")
_INTEGER_RE = re.compile(r"^-?\d+$")
_BORDER_WIDTH_RE = re.compile(
    r"^(\d+(\.\d+)?(px|em|rem|pt|pc|in|cm|mm|ex|ch|vw|vh|vmin|vmax|%)|thin|medium|thick|0)$"
)


# ---------------------------------------------------------------------------
# Shorthand expansion
# ---------------------------------------------------------------------------


def _four_sides(value: str) -> list[str]:
    parts = split_values(value)
    if len(parts) == 1:
        return parts * 4
    if len(parts) == 2:
        return [parts[0], parts[1], parts[0], parts[1]]
    if len(parts) == 3:
        return [parts[0], parts[1], parts[2], parts[1]]
    if len(parts) == 4:
        return parts
    return [value] * 4


def expand_box_shorthand(name: str, value: str) -> dict[str, str]:
    """Expand ``padding``/``margin``/``border-radius``/``gap`` into longhands."""
    if name == "gap":
        parts = split_values(value) or [value]
        return {"row-gap": parts[0], "column-gap": parts[1] if len(parts) > 1 else parts[0]}
    longhands = _BOX_LONGHANDS.get(name)
    if longhands is None:
        return {name: value}
    return dict(zip(longhands, _four_sides(value)))


def expand_flex(value: str) -> dict[str, str]:
    """Expand the ``flex`` shorthand. Returns ``{}`` for forms it cannot read."""
    value = " ".join(value.split())
    keywords = {
        "none": ("0", "0", "auto"),
        "auto": ("1", "1", "auto"),
        "initial": ("0", "1", "auto"),
    }
    if value in keywords:
        grow, shrink, basis = keywords[value]
        return {"flex-grow": grow, "flex-shrink": shrink, "flex-basis": basis}

    parts = value.split(" ") if value else []
    if len(parts) == 1 and _NUMBER_RE.match(parts[0]):
        return {"flex-grow": parts[0], "flex-shrink": "1", "flex-basis": "0%"}
    if len(parts) == 2:
        a, b = parts
        if _NUMBER_RE.match(a) and _NUMBER_RE.match(b):
            return {"flex-grow": a, "flex-shrink": b, "flex-basis": "0%"}
        if _NUMBER_RE.match(a):
            return {"flex-grow": a, "flex-shrink": "1", "flex-basis": b}
        return {}
    if len(parts) >= 3 and _NUMBER_RE.match(parts[0]) and _NUMBER_RE.match(parts[1]):
        return {"flex-grow": parts[0], "flex-shrink": parts[1], "flex-basis": " ".join(parts[2:])}
    return {}


def expand_border(value: str) -> dict[str, str]:
    """Expand ``border`` into width/style/color longhands."""
    value = value.strip()
    if not value or value in ("none", "0"):
        return {"border-width": "0", "border-style": "none", "border-color": "transparent"}

    width = style = color = None
    for part in split_values(value):
        if _BORDER_WIDTH_RE.match(part):
            width = width or part
        elif part.lower() in _BORDER_STYLES:
            style = style or part
        else:
            color = color or part

    return {
        "border-width": width or "medium",
        "border-style": style or "none",
        "border-color": color or "currentColor",
    }


def parse_grid_placement(value: str) -> tuple[str, str] | None:
    """Split ``grid-column``/``grid-row`` into ``(start, end)``."""
    value = value.strip()
    if not value:
        return None
    if value.startswith("span "):
        return "auto", " ".join(value.split())
    if "/" in value:
        parts = [p.strip() for p in value.split("/") if p.strip()]
        if len(parts) >= 2:
            return parts[0], parts[1]
    if _INTEGER_RE.match(value):
        return value, "auto"
    return None


# ---------------------------------------------------------------------------
# Declaration blocks
# ---------------------------------------------------------------------------


def normalize_declarations(
    body: str,
    variables: Mapping[str, str],
    warnings: list[CssWarning],
    selector: str | None = None,
    only: frozenset[str] | tuple[str, ...] | None = None,
) -> dict[str, str]:
    """Normalise a declaration body into supported longhand properties.

    Args:
        body: Raw text between the braces of a rule.
        variables: Resolved custom properties used for ``var()`` substitution.
        warnings: Receives unsupported-property and unresolved-variable warnings.
        selector: Selector the body belongs to, attached to warnings.
        only: If given, every other property is ignored silently.
    """
    result: dict[str, str] = {}
    for name, value in split_declarations(body):
        if name.startswith("--"):
            continue
        if only is not None and name not in only:
            continue
        value = _IMPORTANT_RE.sub("", value)
        if name in STRIP_PROPERTIES:
            continue

        resolution = resolve_value(value, variables, name)
        if resolution.has_unresolved:
            warnings.append(
                CssWarning(
                    WarningKind.VARIABLE_UNRESOLVED,
                    f"Unresolved CSS variable in: {name}: {value}",
                    selector=selector,
                    property=name,
                )
            )
        value = resolution.value

        if name == "flex":
            expanded = expand_flex(value)
            if not expanded:
                warnings.append(
                    CssWarning(
                        WarningKind.UNSUPPORTED_PROPERTY,
                        f"Unparsed flex shorthand: {value}",
                        selector=selector,
                        property=name,
                    )
                )
            result.update(expanded)
            continue
        if name == "border":
            result.update(expand_border(value))
            continue
        if name not in SUPPORTED_PROPERTIES:
            warnings.append(
                CssWarning(
                    WarningKind.UNSUPPORTED_PROPERTY,
                    f"Unsupported CSS property: {name}",
                    selector=selector,
                    property=name,
                )
            )
            continue
        if name in _BOX_LONGHANDS or name == "gap":
            result.update(expand_box_shorthand(name, value))
            continue
        if name in ("grid-column", "grid-row"):
            placement = parse_grid_placement(value)
            if placement is not None:
                result[f"{name}-start"], result[f"{name}-end"] = placement
                continue
        result[name] = value
    return result
