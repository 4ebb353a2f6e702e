"""HTML model: the element tree produced by the markup parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

__all__ = ["VOID_TAGS", "ElementNode", "Child", "MarkupElement", "MarkupAnalysis"]

# Tags that never carry children.
VOID_TAGS = frozenset({
    "img",
    "br",
    "hr",
    "input",
    "meta",
    "link",
    "area",
    "base",
    "col",
    "embed",
    "param",
    "source",
    "track",
    "wbr",
})


@dataclass(frozen=True)
class ElementNode:
    """A single parsed element.

    Attributes:
        tag: Lower-cased tag name.
        id: Value of the ``id`` attribute, if present and non-empty.
        classes: Class names in source order, duplicates removed.
        attributes: All attributes keyed by lower-cased name.
        children: Child elements and text leaves in document order.
        synthetic: True for the wrapper :func:`parse_fragment` adds around
            several top-level nodes; it has no counterpart in the source.
    """

    tag: str
    id: str | None = None
    classes: tuple[str, ...] = ()
    attributes: dict[str, str] = field(default_factory=dict)
    children: tuple["ElementNode | str", ...] = ()
    synthetic: bool = False

    @property
    def is_void(self) -> bool:
        return self.tag in VOID_TAGS

    def elements(self) -> list["ElementNode"]:
        """Return child elements, skipping text leaves."""
        return [c for c in self.children if isinstance(c, ElementNode)]

    def text(self) -> str:
        """Concatenated text content of this subtree."""
        parts: list[str] = []
        for child in self.children:
            parts.append(child if isinstance(child, str) else child.text())
        return " ".join(p for p in parts if p)

    def walk(self):
        """Yield this element and every descendant element, depth first."""
        yield self
        for child in self.elements():
            yield from child.walk()


Child = Union[ElementNode, str]


@dataclass(frozen=True)
class MarkupElement:
    """Flat (tag, classes) record used for source/output comparison."""

    tag: str
    classes: tuple[str, ...]


@dataclass
class MarkupAnalysis:
    """Tag and class multisets observed in a markup string."""

    classes: dict[str, int] = field(default_factory=dict)
    tags: dict[str, int] = field(default_factory=dict)
    elements: list[MarkupElement] = field(default_factory=list)
