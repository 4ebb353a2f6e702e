"""Field-by-field validation of the model's repair response.

The response must match the schema exactly: unknown keys, missing keys,
wrong types and out-of-set enum values are all errors. Error strings are
fed back to the model on retry, so they name the offending path.
"""
from __future__ import annotations

from typing import Any

__all__ = [
    "ROOT_KEYS",
    "CONFIDENCE_LEVELS",
    "LAYOUT_DISPLAYS",
    "LAYOUT_PROPERTY_KEYS",
    "PARENT_CHILD_ACTIONS",
    "validate_semantic_response",
]

ROOT_KEYS = (
    "summary",
    "typography_fixes",
    "layout_fixes",
    "spacing_fixes",
    "parent_child_repairs",
    "phantom_elements",
    "requires_human_review",
)

CONFIDENCE_LEVELS = ("high", "medium", "low")
LAYOUT_DISPLAYS = ("flex", "grid", "block")
PARENT_CHILD_ACTIONS = ("apply_spacing_to_parent", "duplicate_layout_rules", "enforce_structure")

LAYOUT_PROPERTY_KEYS = (
    "flex_direction",
    "justify_content",
    "align_items",
    "gap",
    "grid_template_columns",
    "grid_template_rows",
    "grid_column",
    "grid_row",
    "grid_column_start",
    "grid_column_end",
    "grid_row_start",
    "grid_row_end",
)

# Field kinds: "str", "str?" (string or null), "enum" and "object"; the last
# two are checked by dedicated helpers.
_ITEM_FIELDS: dict[str, tuple[tuple[str, str], ...]] = {
    "typography_fixes": (
        ("target_class", "str"),
        ("font_family", "str"),
        ("font_weight", "str?"),
        ("line_height", "str?"),
        ("reason", "str"),
    ),
    "layout_fixes": (
        ("target_class", "str"),
        ("display", "enum"),
        ("properties", "object"),
        ("reason", "str"),
    ),
    "spacing_fixes": (
        ("target_class", "str"),
        ("padding", "str?"),
        ("margin", "str?"),
        ("min_height", "str?"),
        ("max_width", "str?"),
        ("reason", "str"),
    ),
    "parent_child_repairs": (
        ("parent_class", "str"),
        ("child_class", "str"),
        ("action", "enum"),
        ("reason", "str"),
    ),
    "phantom_elements": (
        ("selector", "str"),
        ("action", "enum"),
        ("reason", "str"),
    ),
    "requires_human_review": (
        ("issue", "str"),
        ("context", "str"),
    ),
}

_MISSING = object()


def _check_keys(value: dict[str, Any], allowed: tuple[str, ...], path: str, errors: list[str]) -> None:
    for key in value:
        if key not in allowed:
            errors.append(f"{path} has unexpected key: {key}")


def _check_field(value: Any, kind: str, path: str, errors: list[str]) -> None:
    if kind == "str" and not isinstance(value, str):
        errors.append(f"{path} must be string")
    elif kind == "str?" and value is not None and not isinstance(value, str):
        errors.append(f"{path} must be string|null")


def _check_enum(section: str, index: int, entry: dict[str, Any], errors: list[str]) -> None:
    path = f"{section}[{index}]"
    if section == "layout_fixes":
        if entry.get("display") not in LAYOUT_DISPLAYS:
            errors.append(f"{path}.display must be flex|grid|block")
    elif section == "parent_child_repairs":
        if entry.get("action") not in PARENT_CHILD_ACTIONS:
            errors.append(f"{path}.action invalid")
    elif section == "phantom_elements":
        if entry.get("action") != "remove":
            errors.append(f"{path}.action must be remove")


def _check_layout_properties(index: int, props: Any, errors: list[str]) -> None:
    path = f"layout_fixes[{index}].properties"
    if not isinstance(props, dict):
        errors.append(f"{path} must be object")
        return
    _check_keys(props, LAYOUT_PROPERTY_KEYS, path, errors)
    for key in LAYOUT_PROPERTY_KEYS:
        _check_field(props.get(key, _MISSING), "str?", f"{path}.{key}", errors)


def validate_semantic_response(value: Any) -> list[str]:
    """Return every schema violation in *value*; an empty list means valid."""
    if not isinstance(value, dict):
        return ["Response is not an object"]

    errors: list[str] = []
    for key in value:
        if key not in ROOT_KEYS:
            errors.append(f"Unexpected key: {key}")
    for key in ROOT_KEYS:
        if key not in value:
            errors.append(f"Missing key: {key}")

    summary = value.get("summary")
    if not isinstance(summary, dict):
        errors.append("summary must be an object")
    else:
        issues = summary.get("issues_detected")
        if not isinstance(issues, list) or not all(isinstance(i, str) for i in issues):
            errors.append("summary.issues_detected must be string[]")
        if summary.get("confidence") not in CONFIDENCE_LEVELS:
            errors.append("summary.confidence must be high|medium|low")

    for section in ROOT_KEYS[1:]:
        if not isinstance(value.get(section), list):
            errors.append(f"{section} must be array")

    for section, fields in _ITEM_FIELDS.items():
        items = value.get(section)
        if not isinstance(items, list):
            continue
        allowed = tuple(name for name, _ in fields)
        for index, entry in enumerate(items):
            path = f"{section}[{index}]"
            if not isinstance(entry, dict):
                errors.append(f"{path} must be object")
                continue
            _check_keys(entry, allowed, path, errors)
            for name, kind in fields:
                if kind == "enum":
                    continue
                if kind == "object":
                    _check_layout_properties(index, entry.get(name), errors)
                    continue
                _check_field(entry.get(name, _MISSING), kind, f"{path}.{name}", errors)
            _check_enum(section, index, entry, errors)

    return errors
