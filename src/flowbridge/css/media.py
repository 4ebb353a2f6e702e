"""Media query parsing and breakpoint classification.

Queries are parsed with a small lark LALR grammar (``media.lark``) into a
:class:`MediaQuery`, then classified against the target's breakpoint model:
desktop-first ``max-width`` breakpoints (medium/small/tiny) and large-screen
``min-width`` breakpoints (xlarge/xxlarge/xxxlarge).
"""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError

from flowbridge.css.model import MAX_WIDTH_BREAKPOINTS, MIN_WIDTH_BREAKPOINTS
from flowbridge.errors import MediaQueryError

__all__ = [
    "MediaFeature",
    "MediaQuery",
    "MediaKind",
    "MediaClassification",
    "parse_media_query",
    "classify_media",
    "breakpoint_for",
    "length_to_px",
]

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "media.lark"

# Media types that do not restrict where a rule applies.
_NEUTRAL_TYPES = frozenset({"screen", "all"})

_WIDTH_FEATURES = frozenset({"max-width", "min-width"})

_LENGTH_RE = re.compile(r"^(-?(?:\d+\.?\d*|\.\d+))(px|rem|em)?$")


def length_to_px(value: str) -> float | None:
    """Convert a ``px``/``rem``/``em`` length to pixels (16px root)."""
    match = _LENGTH_RE.match(value.strip().lower())
    if not match:
        return None
    number = float(match.group(1))
    unit = match.group(2)
    if unit in ("rem", "em"):
        return number * 16
    if unit is None and number != 0:
        return None
    return number


@dataclass(frozen=True)
class MediaFeature:
    """One ``(name: value)`` test. ``px`` is set for convertible lengths."""

    name: str
    value: str | None = None
    px: float | None = None


@dataclass(frozen=True)
class MediaQuery:
    text: str
    media_type: str | None = None
    modifier: str | None = None
    features: tuple[MediaFeature, ...] = ()
    negated: bool = False
    disjunctive: bool = False

    def feature(self, name: str) -> MediaFeature | None:
        for feat in self.features:
            if feat.name == name:
                return feat
        return None

    @property
    def max_width(self) -> float | None:
        widths = [f.px for f in self.features if f.name == "max-width" and f.px is not None]
        return min(widths) if widths else None

    @property
    def min_width(self) -> float | None:
        widths = [f.px for f in self.features if f.name == "min-width" and f.px is not None]
        return max(widths) if widths else None


# ---------------------------------------------------------------------------
# Transformer
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Conditions:
    features: tuple[MediaFeature, ...] = ()
    negated: bool = False
    disjunctive: bool = False

    def merge(self, other: "_Conditions") -> "_Conditions":
        return _Conditions(
            self.features + other.features,
            self.negated or other.negated,
            self.disjunctive or other.disjunctive,
        )


@dataclass(frozen=True)
class _Query:
    media_type: str | None
    modifier: str | None
    conditions: _Conditions


_MIN_OPS = {">=", ">"}
_MAX_OPS = {"<=", "<"}
_FLIP = {"<=": ">=", "<": ">", ">=": "<=", ">": "<", "=": "="}


def _ranged(name: str, op: str, value: str) -> MediaFeature:
    if op in _MIN_OPS:
        name = f"min-{name}"
    elif op in _MAX_OPS:
        name = f"max-{name}"
    return MediaFeature(name, value, length_to_px(value))


class MediaTransformer(Transformer):  # type: ignore[type-arg]
    """Fold a media query parse tree into :class:`_Query` records."""

    # ---- values ----

    def dimension(self, items: list[Token]) -> str:
        return str(items[0])

    def keyword(self, items: list[Token]) -> str:
        return str(items[0])

    def ratio(self, items: list[Token]) -> str:
        return f"{items[0]}/{items[1]}"

    # ---- features ----

    def plain_feature(self, items: list[object]) -> _Conditions:
        name, value = str(items[0]), str(items[1])
        return _Conditions((MediaFeature(name, value, length_to_px(value)),))

    def bool_feature(self, items: list[Token]) -> _Conditions:
        return _Conditions((MediaFeature(str(items[0])),))

    def range_feature(self, items: list[object]) -> _Conditions:
        name, op, value = str(items[0]), str(items[1]), str(items[2])
        return _Conditions((_ranged(name, op, value),))

    def reverse_range(self, items: list[Token]) -> _Conditions:
        # "400px <= width" reads as "width >= 400px".
        features = [_ranged(str(items[2]), _FLIP[str(items[1])], str(items[0]))]
        if len(items) == 5:
            features.append(_ranged(str(items[2]), str(items[3]), str(items[4])))
        return _Conditions(tuple(features))

    # ---- conditions ----

    def negated(self, items: list[object]) -> _Conditions:
        inner = items[-1]
        assert isinstance(inner, _Conditions)
        return _Conditions(inner.features, True, inner.disjunctive)

    def group(self, items: list[_Conditions]) -> _Conditions:
        return items[0]

    def condition_query(self, items: list[object]) -> _Conditions:
        result = _Conditions()
        for item in items:
            if isinstance(item, Token):
                # Only OR survives; AND is filtered by the grammar.
                result = _Conditions(result.features, result.negated, True)
            else:
                result = result.merge(item)  # type: ignore[arg-type]
        return result

    # ---- queries ----

    def modifier(self, items: list[Token]) -> str:
        return str(items[0])

    def media_type(self, items: list[Token]) -> str:
        return str(items[0])

    def typed_query(self, items: list[object]) -> _Query:
        modifier: str | None = None
        strings = [i for i in items if isinstance(i, str)]
        if len(strings) == 2:
            modifier, media_type = strings
        else:
            media_type = strings[0]
        conditions = _Conditions()
        for item in items:
            if isinstance(item, _Conditions):
                conditions = conditions.merge(item)
        return _Query(media_type, modifier, conditions)

    def start(self, items: list[object]) -> list[_Query]:
        queries: list[_Query] = []
        for item in items:
            if isinstance(item, _Conditions):
                queries.append(_Query(None, None, item))
            else:
                queries.append(item)  # type: ignore[arg-type]
        return queries


@functools.lru_cache(maxsize=1)
def _parser() -> Lark:
    return Lark(GRAMMAR_PATH.read_text(), parser="lalr", start="start")


def parse_media_query(query: str) -> MediaQuery:
    """Parse a media query prelude (without ``@media``).

    Raises:
        MediaQueryError: If the prelude does not match the grammar.
    """
    text = " ".join(query.strip().lower().split())
    try:
        tree = _parser().parse(text)
    except LarkError as e:
        line = getattr(e, "line", None)
        column = getattr(e, "column", None)
        raise MediaQueryError(str(e), line=line, column=column) from e
    queries: list[_Query] = MediaTransformer().transform(tree)

    first = queries[0]
    conditions = first.conditions
    for extra in queries[1:]:
        conditions = conditions.merge(extra.conditions)
    return MediaQuery(
        text=text,
        media_type=first.media_type,
        modifier=first.modifier,
        features=conditions.features,
        negated=conditions.negated or first.modifier == "not",
        disjunctive=conditions.disjunctive or len(queries) > 1,
    )


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class MediaKind(Enum):
    MAX_WIDTH = "max-width"
    MIN_WIDTH = "min-width"
    UNCONDITIONAL = "unconditional"
    NON_STANDARD = "non-standard"


@dataclass(frozen=True)
class MediaClassification:
    """Where a media block lands in the breakpoint model.

    ``breakpoint`` is ``None`` for standard widths that have no variant of
    their own, such as ``max-width: 1200px`` or mobile-first ``min-width``
    values below 1280px.
    """

    kind: MediaKind
    breakpoint: str | None = None
    width: float | None = None
    query: MediaQuery | None = None

    @property
    def is_standard(self) -> bool:
        return self.kind is not MediaKind.NON_STANDARD


def _max_breakpoint(width: float) -> str | None:
    for limit, name in MAX_WIDTH_BREAKPOINTS:
        if width <= limit:
            return name
    return None


def _min_breakpoint(width: float) -> str | None:
    for limit, name in MIN_WIDTH_BREAKPOINTS:
        if width >= limit:
            return name
    return None


def classify_media(query: str) -> MediaClassification:
    """Classify a media query prelude. Never raises."""
    try:
        parsed = parse_media_query(query)
    except MediaQueryError as e:
        logger.debug("Unparseable media query %r: %s", query, e)
        return MediaClassification(MediaKind.NON_STANDARD)

    non_standard = (
        parsed.negated
        or parsed.disjunctive
        or (parsed.media_type is not None and parsed.media_type not in _NEUTRAL_TYPES)
        or any(f.name not in _WIDTH_FEATURES or f.px is None for f in parsed.features)
    )
    if non_standard:
        return MediaClassification(MediaKind.NON_STANDARD, query=parsed)

    max_width = parsed.max_width
    if max_width is not None:
        return MediaClassification(MediaKind.MAX_WIDTH, _max_breakpoint(max_width), max_width, parsed)
    min_width = parsed.min_width
    if min_width is not None:
        return MediaClassification(MediaKind.MIN_WIDTH, _min_breakpoint(min_width), min_width, parsed)
    return MediaClassification(MediaKind.UNCONDITIONAL, query=parsed)


def breakpoint_for(query: str) -> str | None:
    """Variant key for *query*, or ``None`` if it has no breakpoint of its own."""
    return classify_media(query).breakpoint
