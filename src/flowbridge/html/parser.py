"""Build an :class:`ElementNode` tree from the HTML token stream."""

from __future__ import annotations

import re

from flowbridge.html.lexer import HtmlToken, TokenKind, parse_attributes, tokenize_html
from flowbridge.html.model import (
    VOID_TAGS,
    Child,
    ElementNode,
    MarkupAnalysis,
    MarkupElement,
)

__all__ = ["parse_html", "parse_fragment", "collect_classes", "analyze_markup"]

_WS_RE = re.compile(r"\s+")

# Elements that never contribute to the visible structure.
_ANALYSIS_SKIP_TAGS = frozenset({"meta", "link", "script", "style", "title", "head"})


def _collapse(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def _make_element(token: HtmlToken, children: tuple[Child, ...] = ()) -> ElementNode:
    attributes = parse_attributes(token.attrs)
    classes = tuple(dict.fromkeys(attributes.get("class", "").split()))
    return ElementNode(
        tag=token.value,
        id=attributes.get("id") or None,
        classes=classes,
        attributes=attributes,
        children=children,
    )


def _find_close(tokens: list[HtmlToken], start: int, end: int) -> int:
    """Index of the END token matching the START at *start*, or -1.

    Only same-named tags affect the depth count.
    """
    tag = tokens[start].value
    depth = 1
    for i in range(start + 1, end):
        tok = tokens[i]
        if tok.value != tag:
            continue
        if tok.kind is TokenKind.START and not tok.self_closing:
            depth += 1
        elif tok.kind is TokenKind.END:
            depth -= 1
            if depth == 0:
                return i
    return -1


def _parse_range(tokens: list[HtmlToken], start: int, end: int) -> list[Child]:
    children: list[Child] = []
    i = start
    while i < end:
        tok = tokens[i]
        if tok.kind is TokenKind.TEXT:
            text = _collapse(tok.value)
            if text:
                children.append(text)
            i += 1
        elif tok.kind is TokenKind.START:
            if tok.value in VOID_TAGS or tok.self_closing:
                children.append(_make_element(tok))
                i += 1
                continue
            close = _find_close(tokens, i, end)
            if close == -1:
                # Unbalanced: drop the tag itself, keep parsing what follows it.
                i += 1
                continue
            inner = tuple(_parse_range(tokens, i + 1, close))
            children.append(_make_element(tok, inner))
            i = close + 1
        else:
            # Comments and stray end tags.
            i += 1
    return children


def parse_html(source: str) -> ElementNode | None:
    """Parse *source* and return its first root element, or ``None``."""
    tokens = tokenize_html(source)
    for child in _parse_range(tokens, 0, len(tokens)):
        if isinstance(child, ElementNode):
            return child
    return None


def parse_fragment(source: str) -> ElementNode | None:
    """Parse an HTML fragment that may have several top-level nodes.

    A single top-level element is returned as-is. Several nodes (or bare
    text) are wrapped in a ``div``, as if the source had been wrapped in
    ``<div>...</div>``.
    """
    if not source or not source.strip():
        return None
    tokens = tokenize_html(source)
    top = _parse_range(tokens, 0, len(tokens))
    if not top:
        return None
    if len(top) == 1 and isinstance(top[0], ElementNode):
        return top[0]
    return ElementNode(tag="div", children=tuple(top), synthetic=True)


def collect_classes(node: ElementNode | None) -> list[str]:
    """Every class used in the tree, in first-seen order."""
    if node is None:
        return []
    seen: dict[str, None] = {}
    for element in node.walk():
        for cls in element.classes:
            seen.setdefault(cls, None)
    return list(seen)


def analyze_markup(source: str) -> MarkupAnalysis:
    """Count tags and classes over every start tag in *source*.

    Works on the token stream rather than the tree, so unbalanced markup is
    still counted.
    """
    analysis = MarkupAnalysis()
    for tok in tokenize_html(source):
        if tok.kind is not TokenKind.START or tok.value in _ANALYSIS_SKIP_TAGS:
            continue
        attributes = parse_attributes(tok.attrs)
        classes = tuple(dict.fromkeys(attributes.get("class", "").split()))
        analysis.tags[tok.value] = analysis.tags.get(tok.value, 0) + 1
        for cls in classes:
            analysis.classes[cls] = analysis.classes.get(cls, 0) + 1
        analysis.elements.append(MarkupElement(tok.value, classes))
    return analysis
