"""Deterministic style fixes applied while emitting class styles."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Mapping

from flowbridge.css.variables import resolve_variables_in_properties
from flowbridge.graph.model import TargetStyle
from flowbridge.styleless import parse_style_less, split_values, to_style_less

__all__ = [
    "sanitize_visibility",
    "count_grid_columns",
    "apply_responsive_grid_fixes",
    "normalize_grid_style_less",
    "build_explicit_grid_template",
    "expand_repeat_template",
    "resolve_style_variables",
]

logger = logging.getLogger(__name__)

# Width assumed when estimating auto-fit/auto-fill column counts.
_TARGET_CONTAINER_PX = 1024
_MAX_ESTIMATED_COLUMNS = 6
_MAX_EXPANDED_REPEAT = 12

_REPEAT_RE = re.compile(r"repeat\(\s*(\d+)\s*,\s*([^()]*(?:\([^()]*\)[^()]*)*)\)", re.IGNORECASE)
_REPEAT_COUNT_RE = re.compile(r"repeat\(\s*(\d+)\s*,", re.IGNORECASE)
_MINMAX_RE = re.compile(r"minmax\(\s*([\d.]+)\s*(px|rem|em)\s*,", re.IGNORECASE)
_COMPLEX_TEMPLATE_RE = re.compile(r"auto-fit|auto-fill|minmax\(", re.IGNORECASE)
_COLUMN_TOKEN_RE = re.compile(r"1fr|minmax\(", re.IGNORECASE)

_RESPONSIVE_SMALL = "grid-template-columns: repeat(3, minmax(0, 1fr));"
_RESPONSIVE_TINY = "grid-template-columns: 1fr;"


def sanitize_visibility(style_less: str) -> str:
    """Make hidden-by-default declarations visible.

    Source pages often hide elements until a script animates them in; the
    target has no such script, so ``opacity: 0`` and ``visibility: hidden``
    would leave the element permanently invisible.
    """
    if not style_less:
        return style_less
    props = parse_style_less(style_less)
    if props.get("opacity", "").strip() in ("0", "0%", "0.0"):
        props["opacity"] = "1"
    if props.get("visibility", "").strip().lower() == "hidden":
        props["visibility"] = "visible"
    return to_style_less(props)


def count_grid_columns(template: str | None) -> int:
    """Top-level fr or minmax tracks; ``minmax(0, 1fr)`` is one track."""
    if not template:
        return 0
    match = _REPEAT_COUNT_RE.search(template)
    if match:
        return int(match.group(1))
    return sum(1 for track in split_values(template) if _COLUMN_TOKEN_RE.search(track))


def apply_responsive_grid_fixes(styles: Iterable[TargetStyle]) -> None:
    """Collapse wide grids on small screens unless the source already does."""
    for style in styles:
        base = parse_style_less(style.style_less)
        if "grid" not in base.get("display", "").lower():
            continue
        if count_grid_columns(base.get("grid-template-columns")) < 3:
            continue
        if "small" in style.variants or "tiny" in style.variants:
            continue
        style.variants["small"] = _RESPONSIVE_SMALL
        style.variants["tiny"] = _RESPONSIVE_TINY


# ---------------------------------------------------------------------------
# Grid template normalisation
# ---------------------------------------------------------------------------


def _length_px(value: float, unit: str) -> float:
    return value * 16 if unit.lower() in ("rem", "em") else value


def expand_repeat_template(template: str) -> str | None:
    match = _REPEAT_RE.search(template)
    if not match:
        return None
    count = int(match.group(1))
    track = match.group(2).strip()
    if count <= 0 or not track:
        return None
    return " ".join([track] * count)


def build_explicit_grid_template(template: str) -> str:
    """Rewrite a template using auto-fit/auto-fill or minmax as explicit tracks."""
    trimmed = template.strip()

    match = _REPEAT_RE.search(trimmed)
    if match and 0 < int(match.group(1)) <= _MAX_EXPANDED_REPEAT:
        return " ".join([match.group(2).strip()] * int(match.group(1)))

    if "auto-fit" in trimmed or "auto-fill" in trimmed:
        minmax = _MINMAX_RE.search(trimmed)
        if minmax:
            min_px = _length_px(float(minmax.group(1)), minmax.group(2))
            if min_px > 0:
                estimate = int(_TARGET_CONTAINER_PX // min_px)
                columns = max(1, min(_MAX_ESTIMATED_COLUMNS, estimate))
                return " ".join(["1fr"] * columns)

    return trimmed


def _normalize_template(props: dict[str, str], key: str) -> None:
    template = props.get(key)
    if not template:
        return
    if _COMPLEX_TEMPLATE_RE.search(template):
        explicit = build_explicit_grid_template(template)
        if explicit != template:
            logger.info("Simplified complex %s: %s -> %s", key, template, explicit)
        props[key] = explicit
        return
    expanded = expand_repeat_template(template)
    if expanded:
        props[key] = expanded


def normalize_grid_style_less(style_less: str, is_grid: bool) -> str:
    """Rewrite grid declarations into the explicit form the target expects.

    ``gap`` shorthands become ``grid-row-gap``/``grid-column-gap`` and
    ``repeat()``/``auto-fit`` templates become explicit track lists. Only
    applies when *is_grid* is true; other styles pass through unchanged.
    """
    if not style_less or not is_grid:
        return style_less
    props = parse_style_less(style_less)

    row_gap = props.get("row-gap") or props.get("gap")
    column_gap = props.get("column-gap") or props.get("gap")
    if row_gap and "grid-row-gap" not in props:
        props["grid-row-gap"] = row_gap
    if column_gap and "grid-column-gap" not in props:
        props["grid-column-gap"] = column_gap
    for key in ("gap", "row-gap", "column-gap"):
        props.pop(key, None)

    _normalize_template(props, "grid-template-columns")
    _normalize_template(props, "grid-template-rows")
    return to_style_less(props)


def resolve_style_variables(styles: Iterable[TargetStyle], variables: Mapping[str, str]) -> None:
    """Substitute ``var()`` references left in emitted styles, in place."""
    for style in styles:
        style.style_less = _resolve_style_less(style.style_less, variables)
        style.variants = {
            key: _resolve_style_less(value, variables) for key, value in style.variants.items()
        }


def _resolve_style_less(style_less: str, variables: Mapping[str, str]) -> str:
    if "var(" not in style_less:
        return style_less
    props = parse_style_less(style_less)
    resolved, warnings = resolve_variables_in_properties(props, variables)
    for warning in warnings:
        logger.warning("%s", warning.message)
    return to_style_less(resolved)
