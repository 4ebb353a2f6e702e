"""Patch instructions applied to an emitted payload.

Every instruction is a frozen value object. ``apply`` mutates the payload
it is given and returns a short record of what it did, or ``None`` when
there was nothing to do. :func:`apply_patches` works on a copy.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from flowbridge.graph.model import TargetStyle, XscpPayload
from flowbridge.styleless import merge_style_less, normalize_style_less, to_style_less

__all__ = [
    "MergeStyle",
    "SetStyle",
    "MergeVariant",
    "SetVariant",
    "AddClassToNode",
    "RemoveNode",
    "PatchInstruction",
    "ensure_style",
    "remove_node_and_descendants",
    "apply_patches",
]


def ensure_style(payload: XscpPayload, class_name: str) -> TargetStyle:
    """Return the style for *class_name*, creating an empty one if needed."""
    style = payload.style(class_name)
    if style is None:
        style = TargetStyle(class_name)
        payload.styles.append(style)
    return style


def remove_node_and_descendants(payload: XscpPayload, node_id: str) -> set[str]:
    """Drop a node, its subtree and every child reference to them."""
    by_id = {node.id: node for node in payload.nodes}
    doomed: set[str] = set()
    stack = [node_id]
    while stack:
        current = stack.pop()
        if current in doomed:
            continue
        doomed.add(current)
        node = by_id.get(current)
        if node is not None:
            stack.extend(node.children)

    payload.nodes = [node for node in payload.nodes if node.id not in doomed]
    for node in payload.nodes:
        node.children = [child for child in node.children if child not in doomed]
    return doomed


@dataclass(frozen=True)
class MergeStyle:
    class_name: str
    properties: dict[str, str] = field(default_factory=dict)
    reason: str = ""

    def apply(self, payload: XscpPayload) -> str | None:
        if not self.class_name:
            return None
        style = ensure_style(payload, self.class_name)
        style.style_less = merge_style_less(style.style_less, to_style_less(self.properties))
        return f"mergeStyle:{self.class_name}"


@dataclass(frozen=True)
class SetStyle:
    class_name: str
    style_less: str
    reason: str = ""

    def apply(self, payload: XscpPayload) -> str | None:
        if not self.class_name or not self.style_less:
            return None
        ensure_style(payload, self.class_name).style_less = normalize_style_less(self.style_less)
        return f"setStyle:{self.class_name}"


@dataclass(frozen=True)
class MergeVariant:
    class_name: str
    variant: str
    properties: dict[str, str] = field(default_factory=dict)
    reason: str = ""

    def apply(self, payload: XscpPayload) -> str | None:
        if not self.class_name or not self.variant:
            return None
        style = ensure_style(payload, self.class_name)
        current = style.variants.get(self.variant, "")
        style.variants[self.variant] = merge_style_less(current, to_style_less(self.properties))
        return f"mergeVariant:{self.class_name}:{self.variant}"


@dataclass(frozen=True)
class SetVariant:
    class_name: str
    variant: str
    style_less: str
    reason: str = ""

    def apply(self, payload: XscpPayload) -> str | None:
        if not self.class_name or not self.variant or not self.style_less:
            return None
        style = ensure_style(payload, self.class_name)
        style.variants[self.variant] = normalize_style_less(self.style_less)
        return f"setVariant:{self.class_name}:{self.variant}"


@dataclass(frozen=True)
class AddClassToNode:
    node_id: str
    class_name: str
    reason: str = ""

    def apply(self, payload: XscpPayload) -> str | None:
        node = payload.node(self.node_id)
        if node is None or node.text or not self.class_name:
            return None
        if self.class_name not in node.classes:
            node.classes.append(self.class_name)
        return f"addClass:{self.node_id}:{self.class_name}"


@dataclass(frozen=True)
class RemoveNode:
    node_id: str
    reason: str = ""

    def apply(self, payload: XscpPayload) -> str | None:
        if payload.node(self.node_id) is None:
            return None
        remove_node_and_descendants(payload, self.node_id)
        return f"removeNode:{self.node_id}"


PatchInstruction = Union[MergeStyle, SetStyle, MergeVariant, SetVariant, AddClassToNode, RemoveNode]


def apply_patches(
    payload: XscpPayload,
    patches: list[PatchInstruction],
) -> tuple[XscpPayload, list[str]]:
    """Apply *patches* in order to a deep copy of *payload*.

    Returns the patched copy and the records of the patches that did
    something. The input payload is never modified.
    """
    patched = payload.copy()
    applied: list[str] = []
    for patch in patches:
        record = patch.apply(patched)
        if record is not None:
            applied.append(record)
    return patched, applied
