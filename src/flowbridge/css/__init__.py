"""CSS front end: block lexer, media queries, variables and the class index."""

from flowbridge.css.lexer import CssAtBlock, CssBlock, CssRuleBlock, split_declarations, strip_comments, tokenize_css
from flowbridge.css.media import (
    MediaClassification,
    MediaFeature,
    MediaKind,
    MediaQuery,
    breakpoint_for,
    classify_media,
    length_to_px,
    parse_media_query,
)
from flowbridge.css.model import ClassIndex, ClassIndexEntry, CssWarning, ParsedStylesheet, WarningKind
from flowbridge.css.parser import ELEMENT_CLASS_MAP, SelectorInfo, parse_css, parse_selector
from flowbridge.css.variables import (
    CssVariableMap,
    Resolution,
    extract_variables,
    resolve_value,
    resolve_variables_in_properties,
)

__all__ = [
    "ClassIndex",
    "ClassIndexEntry",
    "CssAtBlock",
    "CssBlock",
    "CssRuleBlock",
    "CssVariableMap",
    "CssWarning",
    "ELEMENT_CLASS_MAP",
    "MediaClassification",
    "MediaFeature",
    "MediaKind",
    "MediaQuery",
    "ParsedStylesheet",
    "Resolution",
    "SelectorInfo",
    "WarningKind",
    "breakpoint_for",
    "classify_media",
    "extract_variables",
    "length_to_px",
    "parse_css",
    "parse_media_query",
    "parse_selector",
    "resolve_value",
    "resolve_variables_in_properties",
    "split_declarations",
    "strip_comments",
    "tokenize_css",
]
