"""Tests for declaration normalisation and shorthand expansion."""

import pytest

from flowbridge.css.model import WarningKind
from flowbridge.css.properties import (
    expand_border,
    expand_box_shorthand,
    expand_flex,
    normalize_declarations,
    parse_grid_placement,
)


class TestExpandBoxShorthand:
    def test_one_value(self):
        assert expand_box_shorthand("margin", "0") == {
            "margin-top": "0",
            "margin-right": "0",
            "margin-bottom": "0",
            "margin-left": "0",
        }

    def test_two_values(self):
        result = expand_box_shorthand("padding", "10px 20px")
        assert result["padding-top"] == "10px"
        assert result["padding-right"] == "20px"
        assert result["padding-bottom"] == "10px"
        assert result["padding-left"] == "20px"

    def test_three_values(self):
        result = expand_box_shorthand("padding", "1px 2px 3px")
        assert result["padding-left"] == "2px"
        assert result["padding-bottom"] == "3px"

    def test_function_values_kept_whole(self):
        result = expand_box_shorthand("margin", "calc(1px + 2px) auto")
        assert result["margin-top"] == "calc(1px + 2px)"
        assert result["margin-right"] == "auto"

    def test_border_radius(self):
        result = expand_box_shorthand("border-radius", "4px 8px")
        assert result["border-top-left-radius"] == "4px"
        assert result["border-top-right-radius"] == "8px"

    def test_gap(self):
        assert expand_box_shorthand("gap", "10px 20px") == {"row-gap": "10px", "column-gap": "20px"}
        assert expand_box_shorthand("gap", "1rem") == {"row-gap": "1rem", "column-gap": "1rem"}


class TestExpandFlex:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("1", ("1", "1", "0%")),
            ("none", ("0", "0", "auto")),
            ("auto", ("1", "1", "auto")),
            ("2 0", ("2", "0", "0%")),
            ("1 200px", ("1", "1", "200px")),
            ("1 0 auto", ("1", "0", "auto")),
        ],
    )
    def test_forms(self, value, expected):
        result = expand_flex(value)
        assert (result["flex-grow"], result["flex-shrink"], result["flex-basis"]) == expected

    def test_unreadable(self):
        assert expand_flex("auto 1") == {}


class TestExpandBorder:
    def test_full(self):
        assert expand_border("1px solid #ccc") == {
            "border-width": "1px",
            "border-style": "solid",
            "border-color": "#ccc",
        }

    def test_none(self):
        assert expand_border("none")["border-style"] == "none"

    def test_defaults(self):
        result = expand_border("dashed")
        assert result == {"border-width": "medium", "border-style": "dashed", "border-color": "currentColor"}


class TestParseGridPlacement:
    def test_slash(self):
        assert parse_grid_placement("1 / 3") == ("1", "3")

    def test_span(self):
        assert parse_grid_placement("span 2") == ("auto", "span 2")

    def test_integer(self):
        assert parse_grid_placement("2") == ("2", "auto")

    def test_unreadable(self):
        assert parse_grid_placement("auto") is None


class TestNormalizeDeclarations:
    def test_important_dropped(self):
        assert normalize_declarations("color: red !important", {}, []) == {"color": "red"}

    def test_motion_stripped_silently(self):
        warnings = []
        assert normalize_declarations("transition: all 1s; animation: spin 1s", {}, warnings) == {}
        assert warnings == []

    def test_unsupported_warned(self):
        warnings = []
        result = normalize_declarations("color: red; zoom: 2", {}, warnings, ".a")
        assert result == {"color": "red"}
        assert warnings[0].kind is WarningKind.UNSUPPORTED_PROPERTY
        assert warnings[0].message == "Unsupported CSS property: zoom"
        assert warnings[0].selector == ".a"

    def test_custom_properties_skipped(self):
        assert normalize_declarations("--x: 1px; color: red", {}, []) == {"color": "red"}

    def test_variables_resolved(self):
        result = normalize_declarations("color: var(--brand)", {"--brand": "#123456"}, [])
        assert result == {"color": "#123456"}

    def test_unresolved_variable_warned(self):
        warnings = []
        result = normalize_declarations("color: var(--nope)", {}, warnings)
        assert result == {"color": "var(--nope)"}
        assert warnings[0].kind is WarningKind.VARIABLE_UNRESOLVED

    def test_shorthands_expanded(self):
        result = normalize_declarations("padding: 8px; flex: 1; border: 1px solid red", {}, [])
        assert result["padding-left"] == "8px"
        assert result["flex-basis"] == "0%"
        assert result["border-color"] == "red"
        assert "padding" not in result
        assert "flex" not in result

    def test_grid_placement_expanded(self):
        result = normalize_declarations("grid-column: 1 / 3", {}, [])
        assert result == {"grid-column-start": "1", "grid-column-end": "3"}

    def test_only_filter(self):
        result = normalize_declarations("color: red; width: 10px", {}, [], only=("color",))
        assert result == {"color": "red"}
