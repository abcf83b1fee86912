# ┌───────────────────────────────────────────────────────────────┐
# │  Copyright (c) 2025 Ateet Vatan Bahmani                       │
# │  Project: MASX AI – Strategic Agentic AI System               │
# │  All rights reserved.                                         │
# └───────────────────────────────────────────────────────────────┘
#
# MASX AI is a proprietary software system developed and owned by Ateet Vatan Bahmani.
# The source code, documentation, workflows, designs, and naming (including "MASX AI")
# are protected by applicable copyright and trademark laws.
#
# Redistribution, modification, commercial use, or publication of any portion of this
# project without explicit written consent is strictly prohibited.
#
# This project is not open-source and is intended solely for internal, research,
# or demonstration use by the author.
#
# Contact: ab@masxai.com | MASXAI.com

"""
Element construction and node tree translation.

Render programs describe their output with `h(type, props, *children)`; the
worker turns the resulting element into a node tree of plain dicts that the
renderer consumes:

    {"type": "container", "tag": "div", "style": {...}, "children": [...]}
    {"type": "text", "text": "Hello", "style": {...}}
    {"type": "image", "src": "https://...", "width": 64, "height": 64, "style": {...}}
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

ElementType = Union[str, Callable[..., Any]]

# Props consumed by the translation itself; everything else is copied onto the node.
_RESERVED_PROPS = ("children", "style", "key")
_IMAGE_TAGS = ("img", "image")
_URL_PATTERN = re.compile(r"""url\(\s*(['"]?)(.*?)\1\s*\)""")


@dataclass(frozen=True)
class Element:
    """An unresolved element: an intrinsic tag or a component plus its props."""

    type: ElementType
    props: Dict[str, Any] = field(default_factory=dict)
    children: Tuple[Any, ...] = ()


def Fragment(children=()):
    """Groups children without adding a container."""
    return list(children) if isinstance(children, (list, tuple)) else [children]


def h(type: ElementType, props: Optional[Dict[str, Any]] = None, *children: Any) -> Element:
    """Create an element, the sandbox equivalent of createElement."""
    if not isinstance(type, str) and not callable(type):
        raise TypeError(f"Element type must be a tag name or a component, got {type!r}")
    props = dict(props or {})
    if not children and "children" in props:
        nested = props.pop("children")
        children = tuple(nested) if isinstance(nested, (list, tuple)) else (nested,)
    else:
        props.pop("children", None)
    return Element(type=type, props=props, children=tuple(children))


def from_element(element: Any) -> Dict[str, Any]:
    """
    Translate an element (or anything a component may return) into a node tree.

    Components are called with their props as keyword arguments, plus
    `children` when the element has any. The root always becomes a single
    node: several top-level nodes are wrapped into a container.
    """
    nodes = _translate(element)
    if len(nodes) == 1:
        return nodes[0]
    return {"type": "container", "tag": "fragment", "style": {}, "children": nodes}


def _translate(value: Any) -> List[Dict[str, Any]]:
    if value is None or isinstance(value, bool):
        return []
    if isinstance(value, (str, int, float)):
        return [{"type": "text", "text": str(value), "style": {}}]
    if isinstance(value, (list, tuple)):
        nodes: List[Dict[str, Any]] = []
        for item in value:
            nodes.extend(_translate(item))
        return nodes
    if isinstance(value, dict) and "type" in value:
        # Already a node.
        return [value]
    if not isinstance(value, Element):
        raise TypeError(f"Cannot render value of type {value.__class__.__name__}")

    if value.type is Fragment:
        return _translate(list(value.children))

    if callable(value.type):
        props = dict(value.props)
        if value.children:
            props["children"] = list(value.children)
        return _translate(value.type(**props))

    return [_intrinsic_node(value)]


def _intrinsic_node(element: Element) -> Dict[str, Any]:
    tag = element.type
    style = dict(element.props.get("style") or {})
    extra = {k: v for k, v in element.props.items() if k not in _RESERVED_PROPS}

    if tag in _IMAGE_TAGS:
        node = {"type": "image", "tag": tag, "style": style}
        node.update(extra)
        if "src" not in node:
            raise ValueError("Image elements require a 'src' prop")
        return node

    children = _translate(list(element.children))
    node = {"type": "container", "tag": tag, "style": style, "children": children}
    node.update(extra)
    return node


def extract_resource_urls(node: Dict[str, Any]) -> List[str]:
    """
    Collect external locators referenced by a node tree.

    Image sources and `url(...)` references inside style values are
    collected once each, in tree order. Inline `data:` URIs are skipped.
    """
    urls: Dict[str, None] = {}
    _collect(node, urls)
    return list(urls)


def _collect(node: Dict[str, Any], urls: Dict[str, None]) -> None:
    if node.get("type") == "image":
        _add_url(node.get("src"), urls)

    for value in (node.get("style") or {}).values():
        if isinstance(value, str):
            for match in _URL_PATTERN.finditer(value):
                _add_url(match.group(2), urls)

    for child in node.get("children") or ():
        if isinstance(child, dict):
            _collect(child, urls)


def _add_url(candidate: Any, urls: Dict[str, None]) -> None:
    if not isinstance(candidate, str):
        return
    candidate = candidate.strip()
    if candidate and not candidate.startswith("data:"):
        urls.setdefault(candidate, None)
