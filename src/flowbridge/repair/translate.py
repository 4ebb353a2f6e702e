"""Translate a validated repair response into patch instructions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from flowbridge.diagnostics.model import DiagnosticReport
from flowbridge.diagnostics.rules import LAYOUT_PROPERTIES, SPACING_PROPERTIES
from flowbridge.graph.model import TargetNode, XscpPayload
from flowbridge.repair.patches import AddClassToNode, MergeStyle, PatchInstruction, RemoveNode
from flowbridge.repair.schema import LAYOUT_PROPERTY_KEYS
from flowbridge.styleless import parse_style_less

__all__ = [
    "ReviewItem",
    "PatchSet",
    "phantom_node_ids",
    "resolve_phantom_selector",
    "translate_response",
]


@dataclass(frozen=True)
class ReviewItem:
    issue: str
    context: str

    def __str__(self) -> str:
        return f"{self.issue} ({self.context})"


@dataclass
class PatchSet:
    patches: list[PatchInstruction] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    requires_review: list[ReviewItem] = field(default_factory=list)
    summary_issues: list[str] = field(default_factory=list)
    confidence: str = "low"


def _snake_to_css(name: str) -> str:
    return name.replace("_", "-")


def _copy_properties(payload: XscpPayload, class_name: str, allowed: Iterable[str]) -> dict[str, str]:
    style = payload.style(class_name)
    if style is None:
        return {}
    allowed = set(allowed)
    return {prop: value for prop, value in parse_style_less(style.style_less).items() if prop in allowed}


def _parents_missing_class(payload: XscpPayload, parent_class: str, child_class: str) -> list[str]:
    """Parents of *child_class* nodes that do not already carry *parent_class*."""
    parent_of: dict[str, TargetNode] = {}
    for node in payload.nodes:
        for child_id in node.children:
            parent_of[child_id] = node
    targets: list[str] = []
    for node in payload.element_nodes():
        if child_class not in node.classes:
            continue
        parent = parent_of.get(node.id)
        if parent is None or parent_class in parent.classes or parent.id in targets:
            continue
        targets.append(parent.id)
    return targets


def phantom_node_ids(phantoms: Iterable[str]) -> set[str]:
    """Node ids from ``tag#id`` phantom report entries."""
    ids: set[str] = set()
    for entry in phantoms:
        _, sep, node_id = entry.partition("#")
        if sep and node_id.strip():
            ids.add(node_id.strip())
    return ids


def resolve_phantom_selector(selector: str, payload: XscpPayload, phantom_ids: set[str]) -> list[str]:
    """Node ids a removal selector may target.

    Accepts ``#id``, ``tag#id``, ``.class`` and bare ids. Only nodes the
    diagnostics already flagged as phantoms are ever returned.
    """
    selector = selector.strip()
    if not selector:
        return []
    if "#" in selector:
        node_id = selector.partition("#")[2]
        if node_id in phantom_ids:
            return [node_id]
    if selector.startswith("."):
        class_name = selector[1:]
        return [n.id for n in payload.element_nodes() if class_name in n.classes and n.id in phantom_ids]
    if selector in phantom_ids:
        return [selector]
    return []


def translate_response(
    response: dict[str, Any],
    payload: XscpPayload,
    report: DiagnosticReport,
) -> PatchSet:
    """Map a schema-valid response onto patches against *payload*."""
    result = PatchSet(
        summary_issues=list(response["summary"]["issues_detected"]),
        confidence=response["summary"]["confidence"],
        requires_review=[ReviewItem(r["issue"], r["context"]) for r in response["requires_human_review"]],
    )
    patches = result.patches

    for fix in response["typography_fixes"]:
        props = {"font-family": fix["font_family"]}
        if fix["font_weight"]:
            props["font-weight"] = fix["font_weight"]
        if fix["line_height"]:
            props["line-height"] = fix["line_height"]
        patches.append(MergeStyle(fix["target_class"], props, fix["reason"]))

    for fix in response["layout_fixes"]:
        props = {"display": fix["display"]}
        for key in LAYOUT_PROPERTY_KEYS:
            value = fix["properties"].get(key)
            if value:
                props[_snake_to_css(key)] = value
        patches.append(MergeStyle(fix["target_class"], props, fix["reason"]))

    for fix in response["spacing_fixes"]:
        props = {
            _snake_to_css(key): fix[key]
            for key in ("padding", "margin", "min_height", "max_width")
            if fix[key]
        }
        if props:
            patches.append(MergeStyle(fix["target_class"], props, fix["reason"]))

    for repair in response["parent_child_repairs"]:
        parent, child, action = repair["parent_class"], repair["child_class"], repair["action"]
        if action == "apply_spacing_to_parent":
            copied = _copy_properties(payload, child, SPACING_PROPERTIES)
            if not copied:
                result.notes.append(f"No spacing properties found to copy from .{child}")
                continue
            patches.append(MergeStyle(parent, copied, repair["reason"]))
        elif action == "duplicate_layout_rules":
            copied = _copy_properties(payload, child, LAYOUT_PROPERTIES)
            if not copied:
                result.notes.append(f"No layout properties found to copy from .{child}")
                continue
            patches.append(MergeStyle(parent, copied, repair["reason"]))
        elif action == "enforce_structure":
            targets = _parents_missing_class(payload, parent, child)
            if not targets:
                result.notes.append(f"No parent nodes found for .{child}")
                continue
            patches.extend(AddClassToNode(node_id, parent, repair["reason"]) for node_id in targets)

    synthetic = {node.id for node in payload.nodes if node.synthetic}
    flagged = phantom_node_ids(report.phantom_elements) - synthetic
    for phantom in response["phantom_elements"]:
        if phantom["action"] != "remove":
            continue
        targets = resolve_phantom_selector(phantom["selector"], payload, flagged)
        if not targets:
            result.notes.append(f"Skipped phantom removal for {phantom['selector']} (not in diagnostics)")
            continue
        patches.extend(RemoveNode(node_id, phantom["reason"]) for node_id in targets)

    return result
