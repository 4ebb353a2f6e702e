"""HTML front end: lexer, tree parser and markup analysis."""

from flowbridge.html.lexer import HtmlToken, TokenKind, parse_attributes, tokenize_html
from flowbridge.html.model import VOID_TAGS, ElementNode, MarkupAnalysis, MarkupElement
from flowbridge.html.parser import analyze_markup, collect_classes, parse_fragment, parse_html

__all__ = [
    "VOID_TAGS",
    "ElementNode",
    "HtmlToken",
    "MarkupAnalysis",
    "MarkupElement",
    "TokenKind",
    "analyze_markup",
    "collect_classes",
    "parse_attributes",
    "parse_fragment",
    "parse_html",
    "tokenize_html",
]
