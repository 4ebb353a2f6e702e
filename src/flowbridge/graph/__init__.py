"""Back end: emit the ``@webflow/XscpData`` node/style graph."""

from flowbridge.graph.builder import (
    DROP_TAGS,
    GRID_MARKER_CLASS,
    CssTokenPayload,
    build_css_token_payload,
    build_nodes,
    build_payload,
    build_style,
    build_styles,
    convert,
    is_grid_class,
)
from flowbridge.graph.fixes import (
    apply_responsive_grid_fixes,
    count_grid_columns,
    resolve_style_variables,
    normalize_grid_style_less,
    sanitize_visibility,
)
from flowbridge.graph.ids import IdGenerator, extract_prefix
from flowbridge.graph.model import PAYLOAD_TYPE, NodeType, TargetNode, TargetStyle, XscpPayload
from flowbridge.graph.tokens import (
    DesignToken,
    TokenType,
    build_token_payload,
    categorize_variable,
    extract_design_tokens,
    scale_rem,
    to_rem,
)

__all__ = [
    "DROP_TAGS",
    "GRID_MARKER_CLASS",
    "PAYLOAD_TYPE",
    "CssTokenPayload",
    "DesignToken",
    "IdGenerator",
    "NodeType",
    "TargetNode",
    "TargetStyle",
    "TokenType",
    "XscpPayload",
    "apply_responsive_grid_fixes",
    "build_css_token_payload",
    "build_nodes",
    "build_payload",
    "build_style",
    "build_styles",
    "build_token_payload",
    "categorize_variable",
    "convert",
    "count_grid_columns",
    "resolve_style_variables",
    "extract_design_tokens",
    "extract_prefix",
    "is_grid_class",
    "normalize_grid_style_less",
    "sanitize_visibility",
    "scale_rem",
    "to_rem",
]
