"""Deterministic node id generation."""

from __future__ import annotations

import re

__all__ = ["IdGenerator", "extract_prefix", "DEFAULT_PREFIX"]

DEFAULT_PREFIX = "wf"

_PREFIX_RE = re.compile(r"^([a-z]+)-", re.IGNORECASE)


class IdGenerator:
    """Produce ``{prefix}-{base}-{NNN}`` ids with a counter per base name."""

    def __init__(self, prefix: str = DEFAULT_PREFIX) -> None:
        self.prefix = prefix
        self._counters: dict[str, int] = {}

    def generate(self, base: str | None = None) -> str:
        key = base or "node"
        count = self._counters.get(key, 0) + 1
        self._counters[key] = count
        return f"{self.prefix}-{key}-{count:03d}"

    def reset(self) -> None:
        self._counters.clear()


def extract_prefix(class_name: str | None) -> str | None:
    """Leading ``name-`` segment of a class (``fp-hero`` -> ``fp``)."""
    if not class_name:
        return None
    match = _PREFIX_RE.match(class_name)
    return match.group(1).lower() if match else None
