"""Tests for patch instructions."""
from __future__ import annotations

import pytest

from flowbridge.diagnostics import DiagnosticReport
from flowbridge.graph import NodeType, TargetNode, TargetStyle, XscpPayload
from flowbridge.repair import (
    AddClassToNode,
    MergeStyle,
    MergeVariant,
    RemoveNode,
    SetStyle,
    SetVariant,
    apply_patches,
    translate_response,
    validate_semantic_response,
)
from flowbridge.repair.patches import remove_node_and_descendants


@pytest.fixture()
def payload() -> XscpPayload:
    return XscpPayload(
        nodes=[
            TargetNode("root", NodeType.BLOCK, classes=["wrap"], children=["a", "b"]),
            TargetNode("a", NodeType.BLOCK, classes=["card"], children=["a-text"]),
            TargetNode.text_node("a-text", "A"),
            TargetNode("b", NodeType.BLOCK, classes=["card"]),
        ],
        styles=[TargetStyle("card", "color: red; padding-top: 4px;", {"hover": "color: blue;"})],
    )


# ---------------------------------------------------------------------------
# Style patches
# ---------------------------------------------------------------------------


class TestStylePatches:
    def test_merge_style_overrides_per_property(self, payload) -> None:
        record = MergeStyle("card", {"color": "green", "margin-top": "0"}).apply(payload)
        assert record == "mergeStyle:card"
        assert payload.style("card").style_less == "color: green; padding-top: 4px; margin-top: 0;"

    def test_merge_style_creates_missing(self, payload) -> None:
        MergeStyle("new", {"display": "flex"}).apply(payload)
        assert payload.style("new").style_less == "display: flex;"

    def test_merge_style_empty_class(self, payload) -> None:
        assert MergeStyle("", {"color": "red"}).apply(payload) is None

    def test_set_style_replaces(self, payload) -> None:
        record = SetStyle("card", "margin: 0").apply(payload)
        assert record == "setStyle:card"
        assert payload.style("card").style_less == "margin: 0;"

    def test_set_style_empty(self, payload) -> None:
        assert SetStyle("card", "").apply(payload) is None

    def test_merge_variant(self, payload) -> None:
        record = MergeVariant("card", "hover", {"opacity": "0.8"}).apply(payload)
        assert record == "mergeVariant:card:hover"
        assert payload.style("card").variants["hover"] == "color: blue; opacity: 0.8;"

    def test_set_variant(self, payload) -> None:
        record = SetVariant("card", "small", "display: none").apply(payload)
        assert record == "setVariant:card:small"
        assert payload.style("card").variants["small"] == "display: none;"


# ---------------------------------------------------------------------------
# Node patches
# ---------------------------------------------------------------------------


class TestNodePatches:
    def test_add_class(self, payload) -> None:
        assert AddClassToNode("a", "featured").apply(payload) == "addClass:a:featured"
        assert payload.node("a").classes == ["card", "featured"]

    def test_add_class_idempotent(self, payload) -> None:
        AddClassToNode("a", "card").apply(payload)
        assert payload.node("a").classes == ["card"]

    def test_add_class_missing_node(self, payload) -> None:
        assert AddClassToNode("ghost", "x").apply(payload) is None

    def test_add_class_text_node(self, payload) -> None:
        assert AddClassToNode("a-text", "x").apply(payload) is None

    def test_remove_node_with_descendants(self, payload) -> None:
        assert RemoveNode("a").apply(payload) == "removeNode:a"
        assert [n.id for n in payload.nodes] == ["root", "b"]
        assert payload.node("root").children == ["b"]

    def test_remove_missing_node(self, payload) -> None:
        assert RemoveNode("ghost").apply(payload) is None

    def test_remove_helper_returns_ids(self, payload) -> None:
        assert remove_node_and_descendants(payload, "a") == {"a", "a-text"}


# ---------------------------------------------------------------------------
# apply_patches
# ---------------------------------------------------------------------------


class TestApplyPatches:
    def test_input_untouched(self, payload) -> None:
        patched, applied = apply_patches(payload, [MergeStyle("card", {"color": "green"}), RemoveNode("b")])
        assert applied == ["mergeStyle:card", "removeNode:b"]
        assert payload.style("card").style_less == "color: red; padding-top: 4px;"
        assert payload.node("b") is not None
        assert patched.node("b") is None

    def test_noop_patches_not_recorded(self, payload) -> None:
        _, applied = apply_patches(payload, [RemoveNode("ghost"), AddClassToNode("a", "x")])
        assert applied == ["addClass:a:x"]

    def test_applied_in_order(self, payload) -> None:
        patched, _ = apply_patches(
            payload, [SetStyle("card", "color: black;"), MergeStyle("card", {"color": "white"})]
        )
        assert patched.style("card").style_less == "color: white;"

    def test_reapplying_validated_patch_set_is_noop(self, payload, make_response, layout_properties) -> None:
        response = make_response(
            typography_fixes=[
                {"target_class": "card", "font_family": "Inter", "font_weight": None, "line_height": "1.5", "reason": "r"}
            ],
            layout_fixes=[
                {"target_class": "wrap", "display": "flex", "properties": layout_properties(gap="8px"), "reason": "r"}
            ],
            spacing_fixes=[
                {
                    "target_class": "fresh",
                    "padding": "4px",
                    "margin": None,
                    "min_height": None,
                    "max_width": "600px",
                    "reason": "r",
                }
            ],
            parent_child_repairs=[
                {"parent_class": "wrap", "child_class": "card", "action": "apply_spacing_to_parent", "reason": "r"}
            ],
            phantom_elements=[{"selector": "div#b", "action": "remove", "reason": "r"}],
        )
        assert validate_semantic_response(response) == []
        patch_set = translate_response(response, payload, DiagnosticReport(phantom_elements=["div#b"]))

        once, applied = apply_patches(payload, patch_set.patches)
        twice, _ = apply_patches(once, patch_set.patches)
        assert len(applied) == 5
        assert twice.to_json() == once.to_json()
