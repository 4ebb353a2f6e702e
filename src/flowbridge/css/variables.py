"""CSS custom property extraction and ``var()`` resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping

from flowbridge.css.lexer import CssRuleBlock, split_declarations, tokenize_css
from flowbridge.css.model import CssWarning, WarningKind

__all__ = [
    "CssVariableMap",
    "Resolution",
    "extract_variables",
    "resolve_value",
    "resolve_variables_in_properties",
    "find_var_references",
    "MAX_RESOLUTION_PASSES",
]

logger = logging.getLogger(__name__)

MAX_RESOLUTION_PASSES = 5

# Selectors whose custom properties are treated as global.
_GLOBAL_SELECTORS = frozenset({":root", "html", "body", "*"})

CYCLE_VALUE = "unset"


@dataclass(frozen=True)
class Resolution:
    value: str
    unresolved: tuple[str, ...] = ()

    @property
    def has_unresolved(self) -> bool:
        return bool(self.unresolved)


@dataclass(frozen=True)
class _VarCall:
    start: int
    end: int  # index one past the closing paren
    name: str
    fallback: str | None


def _scan_var_calls(value: str) -> list[_VarCall]:
    """Find top-level ``var(...)`` calls, matching parentheses."""
    calls: list[_VarCall] = []
    i = 0
    lower = value.lower()
    while True:
        start = lower.find("var(", i)
        if start == -1:
            break
        if start > 0 and (value[start - 1].isalnum() or value[start - 1] in "-_"):
            # Part of a longer identifier.
            i = start + 4
            continue
        depth = 0
        end = -1
        for j in range(start + 3, len(value)):
            if value[j] == "(":
                depth += 1
            elif value[j] == ")":
                depth -= 1
                if depth == 0:
                    end = j
                    break
        if end == -1:
            break
        inner = value[start + 4:end]
        name, comma, fallback = inner.partition(",")
        name = name.strip()
        if name.startswith("--"):
            calls.append(_VarCall(start, end + 1, name, fallback.strip() if comma else None))
        i = end + 1
    return calls


def find_var_references(value: str) -> list[str]:
    """Every custom property name referenced by *value*, fallbacks included."""
    names: list[str] = []
    for call in _scan_var_calls(value):
        names.append(call.name)
        if call.fallback:
            names.extend(find_var_references(call.fallback))
    return names


def _strip_quotes(value: str, keep: bool) -> str:
    value = value.strip()
    if keep or len(value) < 2:
        return value
    if value[0] in ("'", '"') and value[0] == value[-1]:
        return value[1:-1]
    return value


def resolve_value(
    value: str,
    variables: Mapping[str, str],
    property: str | None = None,
) -> Resolution:
    """Substitute every ``var(--name[, fallback])`` in *value*.

    A defined variable wins over the fallback. Nested references are
    handled by repeating the substitution up to ``MAX_RESOLUTION_PASSES``
    times. Names with neither a definition nor a fallback stay as literal
    ``var(--name)`` and are reported in ``unresolved``.
    """
    keep_quotes = (property or "").lower() == "font-family"
    unresolved: dict[str, None] = {}
    result = value
    for _ in range(MAX_RESOLUTION_PASSES):
        calls = _scan_var_calls(result)
        if not calls:
            break
        parts: list[str] = []
        cursor = 0
        for call in calls:
            parts.append(result[cursor:call.start])
            if call.name in variables:
                parts.append(_strip_quotes(variables[call.name], keep_quotes))
            elif call.fallback:
                parts.append(_strip_quotes(call.fallback, keep_quotes))
            else:
                unresolved.setdefault(call.name, None)
                parts.append(f"var({call.name})")
            cursor = call.end
        parts.append(result[cursor:])
        updated = "".join(parts)
        if updated == result:
            break
        result = updated
    return Resolution(result.strip(), tuple(unresolved))


def _find_cycles(raw: Mapping[str, str]) -> set[str]:
    """Names that sit on a reference cycle (Tarjan's SCC, with an explicit stack)."""
    graph = {name: [r for r in find_var_references(value) if r in raw] for name, value in raw.items()}
    index: dict[str, int] = {}
    low: dict[str, int] = {}
    stack: list[str] = []
    on_stack: set[str] = set()
    cyclic: set[str] = set()
    work: list[tuple[str, Iterator[str]]] = []

    def enter(node: str) -> None:
        index[node] = low[node] = len(index)
        stack.append(node)
        on_stack.add(node)
        work.append((node, iter(graph[node])))

    for root in graph:
        if root in index:
            continue
        enter(root)
        while work:
            node, refs = work[-1]
            for ref in refs:
                if ref not in index:
                    enter(ref)
                    break
                if ref in on_stack:
                    low[node] = min(low[node], index[ref])
            else:
                work.pop()
                if work:
                    parent = work[-1][0]
                    low[parent] = min(low[parent], low[node])
                if low[node] != index[node]:
                    continue
                component: list[str] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                if len(component) > 1 or node in graph[node]:
                    cyclic.update(component)
    return cyclic


class CssVariableMap(Mapping[str, str]):
    """Custom properties keyed by ``--name``.

    Lookups return fully resolved values: references to other variables are
    chained, and every variable on a reference cycle resolves to ``unset``.
    The raw definitions are kept untouched in :attr:`raw`.
    """

    def __init__(self, raw: Mapping[str, str] | None = None):
        self._raw = dict(raw or {})
        self.cycles = frozenset(_find_cycles(self._raw))
        if self.cycles:
            logger.warning("CSS variable cycle detected: %s", ", ".join(sorted(self.cycles)))
        self._resolved = self._resolve_all()

    def _resolve_all(self) -> dict[str, str]:
        resolved: dict[str, str] = {name: CYCLE_VALUE for name in self.cycles}
        for root in self._raw:
            pending = [root]
            while pending:
                name = pending[-1]
                if name in resolved:
                    pending.pop()
                    continue
                value = self._raw[name]
                # References are resolved before the names that use them.
                waiting = [ref for ref in find_var_references(value) if ref in self._raw and ref not in resolved]
                if waiting:
                    pending.extend(waiting)
                    continue
                pending.pop()
                resolved[name] = resolve_value(value, resolved).value
        return {name: resolved[name] for name in self._raw}

    @property
    def raw(self) -> Mapping[str, str]:
        return MappingProxyType(self._raw)

    def __getitem__(self, name: str) -> str:
        return self._resolved[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._resolved)

    def __len__(self) -> int:
        return len(self._resolved)

    def __repr__(self) -> str:
        return f"CssVariableMap({self._resolved!r})"


def _is_global_selector(selector: str) -> bool:
    return any(part.strip().lower() in _GLOBAL_SELECTORS for part in selector.split(","))


def extract_variables(source: str) -> CssVariableMap:
    """Collect custom properties from top-level ``:root``/``html``/``body``/``*`` rules.

    The first definition of a name wins.
    """
    raw: dict[str, str] = {}
    for block in tokenize_css(source):
        if not isinstance(block, CssRuleBlock) or not _is_global_selector(block.selector):
            continue
        for name, value in split_declarations(block.body):
            if name.startswith("--"):
                raw.setdefault(name, value)
    return CssVariableMap(raw)


def resolve_variables_in_properties(
    properties: Mapping[str, str],
    variables: Mapping[str, str],
) -> tuple[dict[str, str], list[CssWarning]]:
    """Resolve ``var()`` in every value of a declaration block."""
    resolved: dict[str, str] = {}
    warnings: list[CssWarning] = []
    for name, value in properties.items():
        result = resolve_value(value, variables, name)
        if result.has_unresolved:
            warnings.append(
                CssWarning(
                    WarningKind.VARIABLE_UNRESOLVED,
                    f"Unresolved CSS variable in: {name}: {value}",
                    property=name,
                )
            )
        resolved[name] = result.value
    return resolved, warnings
