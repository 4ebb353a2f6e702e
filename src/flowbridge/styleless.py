"""Helpers for the flat ``prop: value;`` declaration strings ("styleLess").

Every emitted style and variant carries its declarations as a single
styleLess string. These helpers convert between that representation and
ordered property dictionaries so the rest of the pipeline can merge and
inspect declarations without re-parsing CSS.
"""

from __future__ import annotations

import re

__all__ = [
    "split_top_level",
    "split_values",
    "parse_style_less",
    "to_style_less",
    "merge_style_less",
    "merge_preserve_existing",
    "normalize_style_less",
    "get_property",
]

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)


def split_top_level(text: str, separator: str) -> list[str]:
    """Split *text* on *separator* outside parentheses and quoted strings.

    Empty chunks are dropped and the remaining chunks are stripped.
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    quote: str | None = None
    for ch in text:
        if quote:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        elif ch == separator and depth == 0:
            chunk = "".join(current).strip()
            if chunk:
                parts.append(chunk)
            current = []
            continue
        current.append(ch)
    chunk = "".join(current).strip()
    if chunk:
        parts.append(chunk)
    return parts


def split_values(value: str) -> list[str]:
    """Split a space-separated value list, keeping ``fn(a b)`` groups intact."""
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    for ch in value:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        if ch.isspace() and depth == 0:
            if current:
                parts.append("".join(current))
                current = []
            continue
        current.append(ch)
    if current:
        parts.append("".join(current))
    return parts


def parse_style_less(style_less: str | None) -> dict[str, str]:
    """Parse a styleLess string into an ordered ``{property: value}`` dict.

    Property names are lower-cased; later duplicates override earlier ones
    but keep the position of the first occurrence.
    """
    props: dict[str, str] = {}
    if not style_less:
        return props
    clean = _COMMENT_RE.sub("", style_less)
    for chunk in split_top_level(clean, ";"):
        name, sep, value = chunk.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        value = value.strip()
        if name and value:
            props[name] = value
    return props


def to_style_less(props: dict[str, str]) -> str:
    """Serialise a property dict back to styleLess."""
    return " ".join(f"{prop}: {value};" for prop, value in props.items())


def merge_style_less(base: str | None, patch: str | None) -> str:
    """Merge *patch* over *base*; patch values win on a per-property basis."""
    merged = parse_style_less(base)
    merged.update(parse_style_less(patch))
    return to_style_less(merged)


def merge_preserve_existing(existing: str | None, incoming: str | None) -> str:
    """Merge *incoming* under *existing*; only missing properties are added."""
    merged = parse_style_less(existing)
    for prop, value in parse_style_less(incoming).items():
        merged.setdefault(prop, value)
    return to_style_less(merged)


def normalize_style_less(style_less: str) -> str:
    """Re-terminate every declaration with ``;`` and join with single spaces."""
    return " ".join(f"{chunk};" for chunk in split_top_level(style_less, ";"))


def get_property(style_less: str | None, prop: str) -> str | None:
    return parse_style_less(style_less).get(prop.lower()) or None
