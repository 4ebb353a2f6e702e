"""Emit the target node/style graph from a parsed element tree and class index."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from flowbridge.css.model import ClassIndex, ClassIndexEntry
from flowbridge.css.parser import parse_css
from flowbridge.graph.fixes import (
    apply_responsive_grid_fixes,
    normalize_grid_style_less,
    sanitize_visibility,
)
from flowbridge.graph.ids import DEFAULT_PREFIX, IdGenerator, extract_prefix
from flowbridge.graph.model import NodeType, TargetNode, TargetStyle, XscpPayload
from flowbridge.html.model import ElementNode
from flowbridge.html.parser import parse_fragment
from flowbridge.styleless import parse_style_less

__all__ = [
    "DROP_TAGS",
    "GRID_MARKER_CLASS",
    "normalize_tag",
    "node_type_for",
    "is_grid_class",
    "build_nodes",
    "build_style",
    "build_styles",
    "build_payload",
    "convert",
    "CssTokenPayload",
    "build_css_token_payload",
]

logger = logging.getLogger(__name__)

DROP_TAGS = frozenset({
    "head",
    "meta",
    "link",
    "title",
    "script",
    "style",
    "noscript",
    "base",
    "iframe",
    "canvas",
    "input",
})

_DIV_TAGS = frozenset({"html", "body", "main", "form", "label", "button"})

_NODE_TYPES = {
    "section": NodeType.SECTION,
    "h1": NodeType.HEADING,
    "h2": NodeType.HEADING,
    "h3": NodeType.HEADING,
    "h4": NodeType.HEADING,
    "h5": NodeType.HEADING,
    "h6": NodeType.HEADING,
    "p": NodeType.PARAGRAPH,
    "a": NodeType.LINK,
    "img": NodeType.IMAGE,
    "video": NodeType.VIDEO,
    "ul": NodeType.LIST,
    "ol": NodeType.LIST,
    "li": NodeType.LIST_ITEM,
}

GRID_MARKER_CLASS = "w-layout-grid"

_SKIP_ATTRS = frozenset({"class", "id", "href", "src", "alt", "target"})


def normalize_tag(tag: str) -> str:
    return "div" if tag in _DIV_TAGS else tag


def node_type_for(tag: str) -> NodeType:
    return _NODE_TYPES.get(tag, NodeType.BLOCK)


def is_grid_class(class_name: str, class_index: ClassIndex) -> bool:
    entry = class_index.get(class_name)
    if entry is None or not entry.base_styles:
        return False
    props = parse_style_less(entry.base_styles)
    if props.get("display", "").lower() in ("grid", "inline-grid"):
        return True
    return "grid-template-columns" in props or "grid-template-rows" in props


def _xattr(element: ElementNode) -> list[dict[str, str]]:
    xattr: list[dict[str, str]] = []
    for name, value in element.attributes.items():
        if name in _SKIP_ATTRS or not value:
            continue
        if name.startswith(("on", "aria-")) or name in ("role", "tabindex"):
            continue
        if not name.startswith("data-"):
            continue
        xattr.append({"name": name, "value": value})
    if element.id:
        xattr.append({"name": "id", "value": element.id})
    return xattr


def _node_data(element: ElementNode, node_type: NodeType, tag: str) -> dict[str, object]:
    attrs = element.attributes
    if node_type is NodeType.LINK:
        link: dict[str, object] = {"mode": "external", "url": attrs.get("href") or "#"}
        if attrs.get("target") is not None:
            link["target"] = attrs["target"]
        return {"link": link}
    if node_type is NodeType.IMAGE:
        attr: dict[str, object] = {"src": attrs.get("src") or "", "alt": attrs.get("alt") or ""}
        if attrs.get("loading") is not None:
            attr["loading"] = attrs["loading"]
        return {"attr": attr}
    return {"tag": tag, "text": False, "xattr": _xattr(element)}


def build_nodes(
    root: ElementNode,
    class_index: ClassIndex,
    id_gen: IdGenerator,
) -> tuple[list[TargetNode], list[str]]:
    """Flatten *root* into target nodes, root first.

    Returns the nodes and the classes they use in first-seen order. The
    synthetic grid marker class is added to nodes but never reported as used.
    """
    nodes: list[TargetNode] = []
    used: dict[str, None] = {}

    def visit(element: ElementNode) -> str | None:
        if element.tag in DROP_TAGS:
            return None
        tag = normalize_tag(element.tag)
        node_type = node_type_for(tag)
        classes = list(element.classes)
        for cls in classes:
            used.setdefault(cls, None)
        if GRID_MARKER_CLASS not in classes and any(is_grid_class(c, class_index) for c in classes):
            classes.append(GRID_MARKER_CLASS)

        node_id = id_gen.generate(element.classes[0] if element.classes else element.id or tag)
        node = TargetNode(
            id=node_id,
            type=node_type,
            tag=tag,
            classes=classes,
            data=_node_data(element, node_type, tag),
            synthetic=element.synthetic,
        )
        nodes.append(node)

        for child in element.children:
            if isinstance(child, str):
                text_id = id_gen.generate("text")
                nodes.append(TargetNode.text_node(text_id, child))
                node.children.append(text_id)
            else:
                child_id = visit(child)
                if child_id is not None:
                    node.children.append(child_id)
        return node_id

    visit(root)
    return nodes, list(used)


def _is_grid_container(entry: ClassIndexEntry) -> bool:
    if not entry.is_layout_container:
        return False
    display = parse_style_less(entry.base_styles).get("display", "").lower()
    return display in ("grid", "inline-grid")


def build_style(entry: ClassIndexEntry) -> TargetStyle:
    """Convert one class index entry into a target style."""
    is_grid = _is_grid_container(entry)
    variants = {
        key: sanitize_visibility(normalize_grid_style_less(value, is_grid))
        for key, value in entry.variants.items()
        if value
    }
    return TargetStyle(
        name=entry.class_name,
        style_less=sanitize_visibility(normalize_grid_style_less(entry.base_styles, is_grid)),
        variants=variants,
        comb="&" if entry.is_combo_class else "",
        children=list(entry.children),
    )


def build_styles(
    used_classes: Iterable[str],
    class_index: ClassIndex,
    established: set[str] | frozenset[str] | None = None,
) -> tuple[list[TargetStyle], list[str]]:
    """Styles for every used class the index defines.

    Classes in *established* were already created by an earlier token
    paste and are skipped. Used classes the index does not know about are
    returned as missing.
    """
    established = established or frozenset()
    styles: list[TargetStyle] = []
    missing: list[str] = []
    for class_name in used_classes:
        if class_name in established:
            continue
        entry = class_index.get(class_name)
        if entry is None:
            missing.append(class_name)
            continue
        styles.append(build_style(entry))
    apply_responsive_grid_fixes(styles)
    if missing:
        logger.warning("%d classes used but not defined: %s", len(missing), ", ".join(missing))
    return styles, missing


def build_payload(
    root: ElementNode,
    class_index: ClassIndex,
    id_prefix: str | None = None,
    established: set[str] | None = None,
) -> tuple[XscpPayload, list[str]]:
    """Nodes and styles for *root*; also returns the missing classes."""
    prefix = id_prefix or extract_prefix(root.classes[0] if root.classes else None) or DEFAULT_PREFIX
    nodes, used = build_nodes(root, class_index, IdGenerator(prefix))
    styles, missing = build_styles(used, class_index, established)
    return XscpPayload(nodes=nodes, styles=styles), missing


def convert(html: str, css: str, id_prefix: str | None = None) -> XscpPayload:
    """Deterministically convert an HTML fragment and its stylesheet."""
    root = parse_fragment(html)
    if root is None:
        return XscpPayload()
    payload, _ = build_payload(root, parse_css(css).class_index, id_prefix)
    return payload


@dataclass
class CssTokenPayload:
    """Result of :func:`build_css_token_payload`."""

    payload: XscpPayload
    established: set[str] = field(default_factory=set)
    warnings: list[str] = field(default_factory=list)


def _has_styles(entry: ClassIndexEntry) -> bool:
    return bool(entry.base_styles) or any(entry.variants.values())


def _combo_chain(class_name: str, class_index: ClassIndex) -> list[str]:
    chain: list[str] = []
    seen: set[str] = set()
    current: str | None = class_name
    while current and current not in seen:
        seen.add(current)
        chain.insert(0, current)
        entry = class_index.get(current)
        current = entry.parent_class if entry else None
    return chain


def build_css_token_payload(css: str, namespace: str = "fp", include_preview: bool = True) -> CssTokenPayload:
    """Establish every class in *css* by pasting one node per class.

    The target only creates a class when a pasted node uses it, so each
    class gets a bare node carrying its combo chain.
    """
    class_index = parse_css(css).class_index
    styles = [build_style(entry) for entry in class_index.classes.values() if _has_styles(entry)]
    established = {style.name for style in styles}

    nodes: list[TargetNode] = []
    class_node_ids: list[str] = []
    for i, style in enumerate(styles):
        node_id = f"{namespace}-class-{i}"
        class_node_ids.append(node_id)
        nodes.append(
            TargetNode(
                id=node_id,
                type=NodeType.BLOCK,
                tag="div",
                classes=_combo_chain(style.name, class_index),
                data={"tag": "div", "text": False},
            )
        )

    if include_preview:
        text_id = f"{namespace}-style-instruction-text"
        instruction_id = f"{namespace}-style-instruction"
        nodes.append(
            TargetNode.text_node(
                text_id,
                f"CSS Styles Established - {len(established)} classes. Delete this wrapper after pasting.",
            )
        )
        nodes.append(
            TargetNode(
                id=instruction_id,
                type=NodeType.BLOCK,
                children=[text_id],
                data={"tag": "div", "text": False},
            )
        )
        nodes.append(
            TargetNode(
                id=f"{namespace}-style-wrapper",
                type=NodeType.BLOCK,
                children=[instruction_id, *class_node_ids],
                data={"tag": "div", "text": False},
            )
        )

    warnings = [w.message for w in class_index.warnings]
    return CssTokenPayload(XscpPayload(nodes=nodes, styles=styles), established, warnings)
