"""Tests for design-token extraction and the token payload."""

import pytest

from flowbridge.css import CssVariableMap
from flowbridge.graph import (
    DesignToken,
    TokenType,
    build_token_payload,
    categorize_variable,
    extract_design_tokens,
    scale_rem,
    to_rem,
)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestCategorizeVariable:
    @pytest.mark.parametrize(
        "name, value, expected",
        [
            ("font-heading", "'Inter', sans-serif", TokenType.FONT_FAMILY),
            ("space-md", "16px", TokenType.SPACING),
            ("section-padding", "clamp(2rem, 5vw, 6rem)", TokenType.SPACING),
            ("brand", "#ff5500", TokenType.COLOR),
            ("overlay", "rgba(0, 0, 0, 0.5)", TokenType.COLOR),
            ("muted", "gray", TokenType.COLOR),
            ("z-top", "10", None),
            ("ease", "cubic-bezier(0.4, 0, 0.2, 1)", None),
        ],
    )
    def test_categories(self, name, value, expected):
        assert categorize_variable(name, value) is expected


class TestExtractDesignTokens:
    def test_radius_skipped(self):
        tokens = extract_design_tokens({"--radius-sm": "4px", "--brand": "#000"})
        assert tokens == [DesignToken("brand", "#000", TokenType.COLOR)]

    def test_alias_classified_by_raw_value(self):
        variables = CssVariableMap({"--brand": "#f00", "--primary": "var(--brand)"})
        tokens = extract_design_tokens(variables, variables.raw)
        primary = next(t for t in tokens if t.name == "primary")
        assert primary.type is TokenType.COLOR
        assert primary.value == "#f00"

    def test_css_var(self):
        assert DesignToken("brand", "#000", TokenType.COLOR).css_var == "--brand"


# ---------------------------------------------------------------------------
# Unit conversion
# ---------------------------------------------------------------------------


class TestRemConversion:
    @pytest.mark.parametrize(
        "value, expected",
        [("16px", "1rem"), ("24px 8px", "1.5rem 0.5rem"), ("5vw", "5vw"), ("1.25rem", "1.25rem"), ("2em", "2em")],
    )
    def test_to_rem(self, value, expected):
        assert to_rem(value) == expected

    def test_scale_rem(self):
        assert scale_rem("1rem", 0.85) == "0.85rem"
        assert scale_rem("2rem 5vw", 1.1) == "2.2rem 5vw"


# ---------------------------------------------------------------------------
# Payload
# ---------------------------------------------------------------------------


class TestBuildTokenPayload:
    @pytest.fixture()
    def payload(self):
        return build_token_payload(
            {"--brand": "#ff0000", "--accent": "#00ff00", "--space-md": "16px", "--font-body": "Inter"},
            namespace="fp",
        )

    def test_style_order(self, payload):
        assert [s.name for s in payload.styles] == [
            "fp-page-wrapper",
            "fp-bg-brand",
            "fp-text-brand",
            "fp-bg-accent",
            "fp-text-accent",
            "fp-border-accent",
            "fp-p-space-md",
            "fp-m-space-md",
            "fp-gap-space-md",
            "fp-font-body",
            "fp-token-grid",
        ]

    def test_color_utilities(self, payload):
        assert payload.style("fp-bg-brand").style_less == "background-color: #ff0000;"
        assert payload.style("fp-text-brand").style_less == "color: #ff0000;"
        assert payload.style("fp-border-accent").style_less == "border-color: #00ff00;"

    def test_spacing_scaled_per_variant(self, payload):
        style = payload.style("fp-p-space-md")
        assert style.style_less == "padding: 1rem;"
        assert style.variants == {
            "tiny": "padding: 0.85rem;",
            "small": "padding: 0.9rem;",
            "medium": "padding: 1rem;",
            "desktop": "padding: 1.1rem;",
        }

    def test_font_utility(self, payload):
        assert payload.style("fp-font-body").style_less == "font-family: Inter;"

    def test_page_wrapper_defaults(self, payload):
        wrapper = payload.style("fp-page-wrapper")
        assert "padding-left: 5vw;" in wrapper.style_less
        assert "padding-top: 0;" in wrapper.style_less
        assert "min-height: 100vh;" in wrapper.style_less
        assert set(wrapper.variants) == {"medium", "small", "tiny"}

    def test_page_wrapper_from_tokens(self):
        payload = build_token_payload(
            {"--light-bg": "#fafafa", "--page-padding": "32px", "--section-margin": "4rem"}
        )
        wrapper = payload.style("fp-page-wrapper")
        assert "padding-left: 32px;" in wrapper.style_less
        assert "padding-top: 4rem;" in wrapper.style_less
        assert "background-color: #fafafa;" in wrapper.style_less

    def test_preview_nodes(self, payload):
        ids = [n.id for n in payload.nodes]
        assert ids[:4] == ["fp-page-wrapper-demo", "fp-instruction", "fp-instruction-text", "fp-token-grid"]
        grid = payload.node("fp-token-grid")
        assert grid.children == ["fp-swatch-brand", "fp-swatch-accent", "fp-font-sample-font-body"]
        assert payload.node("fp-label-brand").v == "brand"
        assert payload.node("fp-font-text-font-body").v == "font-body: Inter"

    def test_every_child_reference_resolves(self, payload):
        ids = {n.id for n in payload.nodes}
        for node in payload.nodes:
            assert set(node.children) <= ids

    def test_empty_variables(self):
        payload = build_token_payload({})
        assert [s.name for s in payload.styles] == ["fp-page-wrapper", "fp-token-grid"]
        assert payload.node("fp-token-grid").children == []
