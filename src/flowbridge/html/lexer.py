"""Cursor-based HTML lexer.

Produces a flat token stream of start tags, end tags, text runs and
comments. The parser builds the element tree from this stream, which keeps
worst-case parse time linear in the input for the lexing step.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

__all__ = ["TokenKind", "HtmlToken", "tokenize_html", "parse_attributes"]

# Elements whose content is raw text and must not be tokenized as markup.
_RAW_TEXT_TAGS = frozenset({"script", "style", "textarea", "title"})

_TAG_NAME_RE = re.compile(r"[a-zA-Z][\w:-]*")

_ATTR_RE = re.compile(
    r"""
    (?P<name>[^\s=/"'>]+)                  # attribute name
    (?:\s*=\s*
        (?:"(?P<dq>[^"]*)"                 # double-quoted value
        |'(?P<sq>[^']*)'                   # single-quoted value
        |(?P<bare>[^\s>]+)                 # bare value
        )
    )?
    """,
    re.VERBOSE,
)


class TokenKind(Enum):
    START = "start"
    END = "end"
    TEXT = "text"
    COMMENT = "comment"


@dataclass(frozen=True)
class HtmlToken:
    """A single lexical token.

    For START/END tokens ``value`` is the lower-cased tag name; for TEXT and
    COMMENT tokens it is the raw text.
    """

    kind: TokenKind
    value: str
    attrs: str = ""
    self_closing: bool = False
    offset: int = 0


def parse_attributes(raw: str) -> dict[str, str]:
    """Parse an attribute string; keys are lower-cased, valueless attrs map to ``""``."""
    attributes: dict[str, str] = {}
    for match in _ATTR_RE.finditer(raw):
        name = match.group("name").lower()
        value = match.group("dq")
        if value is None:
            value = match.group("sq")
        if value is None:
            value = match.group("bare")
        attributes[name] = value or ""
    return attributes


def _scan_tag_end(source: str, pos: int) -> int:
    """Return the index of the ``>`` closing the tag that starts before *pos*.

    Quoted attribute values may contain ``>``. Returns -1 when unterminated.
    """
    quote: str | None = None
    for i in range(pos, len(source)):
        ch = source[i]
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ">":
            return i
    return -1


def tokenize_html(source: str) -> list[HtmlToken]:
    """Split *source* into a list of :class:`HtmlToken`."""
    tokens: list[HtmlToken] = []
    text_start = 0
    i = 0
    n = len(source)

    def flush_text(end: int) -> None:
        if end > text_start:
            tokens.append(HtmlToken(TokenKind.TEXT, source[text_start:end], offset=text_start))

    while i < n:
        if source[i] != "<":
            i += 1
            continue

        if source.startswith("<!--", i):
            flush_text(i)
            close = source.find("-->", i + 4)
            end = n if close == -1 else close + 3
            tokens.append(HtmlToken(TokenKind.COMMENT, source[i + 4:close if close != -1 else n], offset=i))
            i = text_start = end
            continue

        if source.startswith("<!", i) or source.startswith("<?", i):
            # Doctype and processing instructions carry no content.
            flush_text(i)
            close = source.find(">", i)
            i = text_start = n if close == -1 else close + 1
            continue

        if source.startswith("</", i):
            name_match = _TAG_NAME_RE.match(source, i + 2)
            if name_match:
                close = source.find(">", name_match.end())
                if close == -1:
                    break
                flush_text(i)
                tokens.append(HtmlToken(TokenKind.END, name_match.group().lower(), offset=i))
                i = text_start = close + 1
                continue
            i += 1
            continue

        name_match = _TAG_NAME_RE.match(source, i + 1)
        if not name_match:
            # A bare "<" is ordinary text.
            i += 1
            continue
        close = _scan_tag_end(source, name_match.end())
        if close == -1:
            break

        flush_text(i)
        tag = name_match.group().lower()
        raw_attrs = source[name_match.end():close].strip()
        self_closing = raw_attrs.endswith("/")
        if self_closing:
            raw_attrs = raw_attrs[:-1].rstrip()
        tokens.append(HtmlToken(TokenKind.START, tag, raw_attrs, self_closing, offset=i))
        i = text_start = close + 1

        if tag in _RAW_TEXT_TAGS and not self_closing:
            end_re = re.compile(rf"</{re.escape(tag)}\s*>", re.IGNORECASE)
            end_match = end_re.search(source, i)
            raw_end = end_match.start() if end_match else n
            flush_text(raw_end)
            if end_match:
                tokens.append(HtmlToken(TokenKind.END, tag, offset=raw_end))
                i = text_start = end_match.end()
            else:
                i = text_start = n

    flush_text(n if i >= n else i)
    if i < n:
        # Unterminated tag: the remainder is kept as text.
        tokens.append(HtmlToken(TokenKind.TEXT, source[i:], offset=i))
    return tokens
