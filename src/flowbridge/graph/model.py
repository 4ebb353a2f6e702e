"""Target graph model: nodes, class styles and the ``@webflow/XscpData`` envelope."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from flowbridge.errors import PayloadError

__all__ = [
    "PAYLOAD_TYPE",
    "NodeType",
    "TargetNode",
    "TargetStyle",
    "XscpPayload",
    "empty_meta",
]

PAYLOAD_TYPE = "@webflow/XscpData"

_META_KEYS = (
    "unlinkedSymbolCount",
    "droppedLinks",
    "dynBindRemovedCount",
    "dynListBindRemovedCount",
    "paginationRemovedCount",
)


def empty_meta() -> dict[str, int]:
    return {key: 0 for key in _META_KEYS}


class NodeType(Enum):
    BLOCK = "Block"
    LINK = "Link"
    IMAGE = "Image"
    VIDEO = "Video"
    HEADING = "Heading"
    PARAGRAPH = "Paragraph"
    SECTION = "Section"
    LIST = "List"
    LIST_ITEM = "ListItem"


@dataclass
class TargetNode:
    """An element or text node of the target graph.

    Text nodes set ``text=True`` and carry their content in ``v``; every other
    field is unused for them. ``synthetic`` marks the fragment wrapper; it
    is local bookkeeping and never serialised.
    """

    id: str
    type: NodeType | None = None
    tag: str = "div"
    classes: list[str] = field(default_factory=list)
    children: list[str] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    text: bool = False
    v: str | None = None
    synthetic: bool = False

    @classmethod
    def text_node(cls, node_id: str, value: str) -> "TargetNode":
        return cls(id=node_id, text=True, v=value)

    @property
    def is_text(self) -> bool:
        return self.text

    def to_dict(self) -> dict[str, Any]:
        if self.text:
            return {"_id": self.id, "text": True, "v": self.v or ""}
        return {
            "_id": self.id,
            "type": self.type.value if self.type else NodeType.BLOCK.value,
            "tag": self.tag,
            "classes": list(self.classes),
            "children": list(self.children),
            "data": copy.deepcopy(self.data),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "TargetNode":
        if raw.get("text") is True:
            return cls.text_node(str(raw["_id"]), str(raw.get("v", "")))
        type_value = raw.get("type")
        try:
            node_type = NodeType(type_value) if type_value else None
        except ValueError:
            node_type = NodeType.BLOCK
        return cls(
            id=str(raw["_id"]),
            type=node_type,
            tag=str(raw.get("tag", "div")),
            classes=[str(c) for c in raw.get("classes", [])],
            children=[str(c) for c in raw.get("children", [])],
            data=copy.deepcopy(raw.get("data") or {}),
        )


@dataclass
class TargetStyle:
    """A class style: base declarations plus named variants."""

    name: str
    style_less: str = ""
    variants: dict[str, str] = field(default_factory=dict)
    comb: str = ""
    children: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": self.name,
            "fake": False,
            "type": "class",
            "name": self.name,
            "namespace": "",
            "comb": self.comb,
            "styleLess": self.style_less,
            "variants": {key: {"styleLess": value} for key, value in self.variants.items()},
            "children": list(self.children),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "TargetStyle":
        variants = {
            str(key): str((value or {}).get("styleLess", ""))
            for key, value in (raw.get("variants") or {}).items()
        }
        return cls(
            name=str(raw.get("name") or raw["_id"]),
            style_less=str(raw.get("styleLess", "")),
            variants=variants,
            comb=str(raw.get("comb", "")),
            children=[str(c) for c in raw.get("children", [])],
        )


@dataclass
class XscpPayload:
    """The complete clipboard payload."""

    nodes: list[TargetNode] = field(default_factory=list)
    styles: list[TargetStyle] = field(default_factory=list)
    meta: dict[str, int] = field(default_factory=empty_meta)

    # ---- lookups ----

    def node(self, node_id: str) -> TargetNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def style(self, name: str) -> TargetStyle | None:
        for style in self.styles:
            if style.name == name:
                return style
        return None

    def element_nodes(self) -> list[TargetNode]:
        return [n for n in self.nodes if not n.text]

    def parents_of(self, node_id: str) -> list[TargetNode]:
        return [n for n in self.nodes if node_id in n.children]

    # ---- serialisation ----

    def copy(self) -> "XscpPayload":
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": PAYLOAD_TYPE,
            "payload": {
                "nodes": [n.to_dict() for n in self.nodes],
                "styles": [s.to_dict() for s in self.styles],
                "assets": [],
                "ix1": [],
                "ix2": {"interactions": [], "events": [], "actionLists": []},
            },
            "meta": {key: int(self.meta.get(key, 0)) for key in _META_KEYS},
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "XscpPayload":
        if raw.get("type") != PAYLOAD_TYPE:
            raise PayloadError(f"Not an {PAYLOAD_TYPE} payload: type={raw.get('type')!r}")
        inner = raw.get("payload") or {}
        meta = empty_meta()
        meta.update({k: int(v) for k, v in (raw.get("meta") or {}).items() if k in meta})
        return cls(
            nodes=[TargetNode.from_dict(n) for n in inner.get("nodes", [])],
            styles=[TargetStyle.from_dict(s) for s in inner.get("styles", [])],
            meta=meta,
        )
