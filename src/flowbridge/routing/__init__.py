"""CSS router: native styles versus embed block."""

from flowbridge.routing.minifier import minify_css, wrap_embed
from flowbridge.routing.model import (
    ReasonKind,
    RouterWarning,
    RoutingDecision,
    RoutingReason,
    RoutingResult,
    RoutingStats,
)
from flowbridge.routing.router import classify_declarations, classify_selector, format_embed, route_css

__all__ = [
    "ReasonKind",
    "RouterWarning",
    "RoutingDecision",
    "RoutingReason",
    "RoutingResult",
    "RoutingStats",
    "classify_declarations",
    "classify_selector",
    "format_embed",
    "minify_css",
    "route_css",
    "wrap_embed",
]
