"""Size-oriented CSS minifier for embed blocks."""

from __future__ import annotations

import re

__all__ = ["minify_css", "wrap_embed", "EMBED_BANNER"]

_STRING_RE = re.compile(r"""(["'])(?:(?!\1)[^\\]|\\.)*\1""")
_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_WS_RE = re.compile(r"\s+")
_PUNCT_RE = re.compile(r"\s*([{};:,])\s*")
_PLACEHOLDER_RE = re.compile(r"\x00(\d+)\x00")

EMBED_BANNER = (
    "/* === FLOW BRIDGE: Non-Native CSS === */\n"
    "/* These styles cannot be represented in Webflow's native style system */\n"
    "/* Do not modify - regenerate from source HTML if changes needed */"
)


def minify_css(css: str) -> str:
    """Strip comments and redundant whitespace from *css*.

    Quoted strings (``content: " "``, ``url("a b.png")``) are kept verbatim.
    """
    if not css or not css.strip():
        return ""

    strings: list[str] = []

    def stash(match: re.Match[str]) -> str:
        strings.append(match.group(0))
        return f"\x00{len(strings) - 1}\x00"

    result = _STRING_RE.sub(stash, css)
    result = _COMMENT_RE.sub("", result)
    result = _WS_RE.sub(" ", result)
    result = _PUNCT_RE.sub(r"\1", result)
    result = result.replace(";}", "}").strip()
    return _PLACEHOLDER_RE.sub(lambda m: strings[int(m.group(1))], result)


def wrap_embed(css: str) -> str:
    """Wrap embed CSS in a labelled ``<style>`` tag; empty input gives ``""``."""
    if not css or not css.strip():
        return ""
    return f"<style>\n{EMBED_BANNER}\n\n{css}\n</style>"
