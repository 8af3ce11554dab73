#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Lightweight XML helpers for editing OOXML parts held in memory.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from defusedxml import minidom


def _matches_attrs(node, attrs: Optional[Dict[str, str]]) -> bool:
    if not attrs:
        return True
    for key, value in attrs.items():
        if node.getAttribute(key) != value:
            return False
    return True


def local_name(node) -> str:
    return node.tagName.split(":")[-1]


def find_by_local_name(node, local: str) -> List:
    return [child for child in node.getElementsByTagName("*") if local_name(child) == local]


def element_children(node) -> List:
    return [child for child in node.childNodes if child.nodeType == child.ELEMENT_NODE]


class XMLEditor:
    """Simple XML editor built on minidom, bound to one package member."""

    def __init__(self, part_name: str, data: bytes):
        self.part_name = part_name
        self.dom = minidom.parseString(data)

    @property
    def root(self):
        return self.dom.documentElement

    def to_bytes(self) -> bytes:
        return self.dom.toxml(encoding="UTF-8", standalone=True)

    def close(self) -> None:
        self.dom.unlink()

    def get_nodes(self, tag: Optional[str] = None, attrs: Optional[Dict[str, str]] = None) -> List[minidom.Element]:
        if tag:
            nodes = self.dom.getElementsByTagName(tag)
        else:
            nodes = self.dom.getElementsByTagName("*")
        return [node for node in nodes if _matches_attrs(node, attrs)]

    def get_node(self, tag: Optional[str] = None, attrs: Optional[Dict[str, str]] = None):
        nodes = self.get_nodes(tag=tag, attrs=attrs)
        return nodes[0] if nodes else None

    def find_child_index(self, parent, predicate: Callable) -> Optional[int]:
        """Index in ``parent.childNodes`` of the first element matching ``predicate``."""
        for index, child in enumerate(parent.childNodes):
            if child.nodeType == child.ELEMENT_NODE and predicate(child):
                return index
        return None

    def replace_child_at(self, parent, index: int, new_node) -> None:
        old = parent.childNodes[index]
        parent.replaceChild(new_node, old)
        old.unlink()
