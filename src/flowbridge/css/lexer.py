"""Brace-matching CSS block lexer.

Splits a stylesheet into top-level blocks. Rule blocks keep their raw
declaration body and at-rules keep their raw text, so callers can either
re-tokenize a body (``@media``) or pass it through verbatim (``@keyframes``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from flowbridge.styleless import split_top_level

__all__ = [
    "CssRuleBlock",
    "CssAtBlock",
    "CssBlock",
    "strip_comments",
    "tokenize_css",
    "split_declarations",
]


@dataclass(frozen=True)
class CssRuleBlock:
    """``selector { body }``."""

    selector: str
    body: str

    @property
    def raw(self) -> str:
        return f"{self.selector} {{ {self.body.strip()} }}"


@dataclass(frozen=True)
class CssAtBlock:
    """An at-rule. Statement at-rules (``@import ...;``) have ``body=None``."""

    name: str
    prelude: str
    body: str | None
    raw: str


CssBlock = Union[CssRuleBlock, CssAtBlock]


def strip_comments(source: str) -> str:
    """Remove ``/* ... */`` comments, leaving quoted strings untouched."""
    out: list[str] = []
    i = 0
    n = len(source)
    quote: str | None = None
    while i < n:
        ch = source[i]
        if quote:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(source[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
            i += 1
            continue
        if ch in ("'", '"'):
            quote = ch
            out.append(ch)
            i += 1
            continue
        if source.startswith("/*", i):
            end = source.find("*/", i + 2)
            i = n if end == -1 else end + 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _match_brace(source: str, open_index: int) -> int:
    """Index of the ``}`` matching the ``{`` at *open_index*, or -1."""
    depth = 0
    quote: str | None = None
    i = open_index
    n = len(source)
    while i < n:
        ch = source[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _at_rule_name(prelude: str) -> tuple[str, str]:
    head = prelude[1:]
    name_end = 0
    while name_end < len(head) and (head[name_end].isalnum() or head[name_end] in "-_"):
        name_end += 1
    return head[:name_end].lower(), head[name_end:].strip()


def tokenize_css(source: str) -> list[CssBlock]:
    """Split *source* into top-level rule and at-rule blocks.

    Comments are stripped first. An unterminated block swallows the rest of
    the input as its body.
    """
    text = strip_comments(source)
    blocks: list[CssBlock] = []
    i = 0
    n = len(text)
    start = 0
    quote: str | None = None
    while i < n:
        ch = text[i]
        if quote:
            if ch == quote:
                quote = None
            i += 1
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            prelude = text[start:i].strip()
            if prelude.startswith("@"):
                name, rest = _at_rule_name(prelude)
                blocks.append(CssAtBlock(name, rest, None, prelude + ";"))
            # A stray declaration outside any block is dropped.
            start = i + 1
        elif ch == "{":
            prelude = text[start:i].strip()
            close = _match_brace(text, i)
            end = n if close == -1 else close
            body = text[i + 1:end]
            if prelude.startswith("@"):
                name, rest = _at_rule_name(prelude)
                raw = text[start:end + 1].strip() if close != -1 else text[start:].strip() + "}"
                blocks.append(CssAtBlock(name, rest, body, raw))
            elif prelude:
                blocks.append(CssRuleBlock(prelude, body))
            i = start = end + 1
            continue
        elif ch == "}":
            # Unbalanced closing brace.
            start = i + 1
        i += 1
    return blocks


def split_declarations(body: str) -> list[tuple[str, str]]:
    """Split a declaration body into ``(name, value)`` pairs in source order.

    Names are lower-cased. Custom property names keep their case.
    """
    pairs: list[tuple[str, str]] = []
    for chunk in split_top_level(body, ";"):
        name, sep, value = chunk.partition(":")
        if not sep:
            continue
        name = name.strip()
        if not name.startswith("--"):
            name = name.lower()
        value = value.strip()
        if name and value:
            pairs.append((name, value))
    return pairs
