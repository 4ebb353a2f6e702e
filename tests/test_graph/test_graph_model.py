"""Tests for the target graph model and payload envelope."""

import json

import pytest

from flowbridge.errors import PayloadError
from flowbridge.graph import PAYLOAD_TYPE, NodeType, TargetNode, TargetStyle, XscpPayload


def _payload() -> XscpPayload:
    return XscpPayload(
        nodes=[
            TargetNode("n1", NodeType.SECTION, "section", ["hero"], ["t1"], {"tag": "section"}),
            TargetNode.text_node("t1", "Hello"),
        ],
        styles=[TargetStyle("hero", "color: red;", {"small": "color: blue;"})],
    )


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


class TestTargetNode:
    def test_text_node_dict(self):
        assert TargetNode.text_node("t1", "Hi").to_dict() == {"_id": "t1", "text": True, "v": "Hi"}

    def test_element_dict(self):
        node = TargetNode("n1", NodeType.HEADING, "h1", ["title"], ["t1"], {"tag": "h1"})
        assert node.to_dict() == {
            "_id": "n1",
            "type": "Heading",
            "tag": "h1",
            "classes": ["title"],
            "children": ["t1"],
            "data": {"tag": "h1"},
        }

    def test_missing_type_serialises_as_block(self):
        assert TargetNode("n1").to_dict()["type"] == "Block"

    def test_is_text(self):
        assert TargetNode.text_node("t", "x").is_text
        assert not TargetNode("n").is_text

    def test_from_dict_unknown_type(self):
        node = TargetNode.from_dict({"_id": "n", "type": "Mystery", "tag": "div"})
        assert node.type is NodeType.BLOCK

    def test_from_dict_text(self):
        node = TargetNode.from_dict({"_id": "t", "text": True, "v": "Hi"})
        assert node.is_text
        assert node.v == "Hi"


# ---------------------------------------------------------------------------
# Styles
# ---------------------------------------------------------------------------


class TestTargetStyle:
    def test_to_dict(self):
        style = TargetStyle("btn", "color: red;", {"hover": "color: blue;"}, comb="&", children=["x"])
        assert style.to_dict() == {
            "_id": "btn",
            "fake": False,
            "type": "class",
            "name": "btn",
            "namespace": "",
            "comb": "&",
            "styleLess": "color: red;",
            "variants": {"hover": {"styleLess": "color: blue;"}},
            "children": ["x"],
        }

    def test_from_dict(self):
        style = TargetStyle.from_dict(
            {"_id": "a", "name": "a", "styleLess": "margin: 0;", "variants": {"tiny": {"styleLess": "margin: 1px;"}}}
        )
        assert style.style_less == "margin: 0;"
        assert style.variants == {"tiny": "margin: 1px;"}
        assert style.comb == ""


# ---------------------------------------------------------------------------
# Payload
# ---------------------------------------------------------------------------


class TestXscpPayload:
    def test_envelope(self):
        data = _payload().to_dict()
        assert data["type"] == PAYLOAD_TYPE
        assert data["payload"]["assets"] == []
        assert data["payload"]["ix1"] == []
        assert data["payload"]["ix2"] == {"interactions": [], "events": [], "actionLists": []}
        assert data["meta"] == {
            "unlinkedSymbolCount": 0,
            "droppedLinks": 0,
            "dynBindRemovedCount": 0,
            "dynListBindRemovedCount": 0,
            "paginationRemovedCount": 0,
        }

    def test_to_json(self):
        assert json.loads(_payload().to_json())["payload"]["nodes"][1]["v"] == "Hello"

    def test_from_dict_restores(self):
        restored = XscpPayload.from_dict(_payload().to_dict())
        assert restored.node("n1").classes == ["hero"]
        assert restored.style("hero").variants == {"small": "color: blue;"}

    def test_from_dict_wrong_type(self):
        with pytest.raises(PayloadError):
            XscpPayload.from_dict({"type": "something/else", "payload": {}})

    def test_lookups(self):
        payload = _payload()
        assert payload.node("t1").v == "Hello"
        assert payload.node("missing") is None
        assert payload.style("nope") is None
        assert [n.id for n in payload.element_nodes()] == ["n1"]
        assert [n.id for n in payload.parents_of("t1")] == ["n1"]

    def test_copy_is_deep(self):
        payload = _payload()
        clone = payload.copy()
        clone.node("n1").classes.append("extra")
        clone.style("hero").style_less = ""
        assert payload.node("n1").classes == ["hero"]
        assert payload.style("hero").style_less == "color: red;"
