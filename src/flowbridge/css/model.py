"""Data model for the CSS front end: warnings and the class index."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from flowbridge.css.variables import CssVariableMap

__all__ = [
    "WarningKind",
    "CssWarning",
    "ClassIndexEntry",
    "ClassIndex",
    "ParsedStylesheet",
    "PSEUDO_VARIANTS",
    "MAX_WIDTH_BREAKPOINTS",
    "MIN_WIDTH_BREAKPOINTS",
]


class WarningKind(Enum):
    UNSUPPORTED_PROPERTY = "unsupported_property"
    UNSUPPORTED_SELECTOR = "unsupported_selector"
    COMPLEX_SELECTOR = "complex_selector"
    VARIABLE_UNRESOLVED = "variable_unresolved"
    BREAKPOINT_UNMAPPED = "breakpoint_unmapped"


# Supported pseudo-classes and the variant key each one maps to.
PSEUDO_VARIANTS: Mapping[str, str] = MappingProxyType({
    "hover": "hover",
    "focus": "focus",
    "active": "pressed",
    "visited": "visited",
    "focus-visible": "focus-visible",
    "first-child": "first-child",
    "last-child": "last-child",
})

# Desktop-first breakpoints, largest first: (upper bound px, variant key).
MAX_WIDTH_BREAKPOINTS: tuple[tuple[float, str], ...] = (
    (479, "tiny"),
    (767, "small"),
    (991, "medium"),
)

# Large-screen breakpoints: (lower bound px, variant key), largest first.
MIN_WIDTH_BREAKPOINTS: tuple[tuple[float, str], ...] = (
    (1920, "xxxlarge"),
    (1440, "xxlarge"),
    (1280, "xlarge"),
)


@dataclass(frozen=True)
class CssWarning:
    """A recoverable problem found while parsing a stylesheet."""

    kind: WarningKind
    message: str
    selector: str | None = None
    property: str | None = None

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


@dataclass
class ClassIndexEntry:
    """Everything the stylesheet says about one class name.

    ``variants`` keys are pseudo variants (``hover``), breakpoints
    (``small``) or ``breakpoint_pseudo`` compounds (``small_hover``).
    """

    class_name: str
    selectors: list[str] = field(default_factory=list)
    base_styles: str = ""
    variants: dict[str, str] = field(default_factory=dict)
    is_combo_class: bool = False
    parent_class: str | None = None
    parent_classes: list[str] = field(default_factory=list)
    children: list[str] = field(default_factory=list)
    is_layout_container: bool = False


@dataclass
class ClassIndex:
    """Class name to :class:`ClassIndexEntry`, plus parse warnings.

    Treated as read-only once :func:`flowbridge.css.parse_css` returns it.
    """

    classes: dict[str, ClassIndexEntry] = field(default_factory=dict)
    warnings: list[CssWarning] = field(default_factory=list)

    def get(self, class_name: str) -> ClassIndexEntry | None:
        return self.classes.get(class_name)

    def __contains__(self, class_name: object) -> bool:
        return class_name in self.classes

    def __len__(self) -> int:
        return len(self.classes)


@dataclass
class ParsedStylesheet:
    class_index: ClassIndex
    variables: "CssVariableMap"
    tokens_css: str = ""
    clean_css: str = ""
