#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Splice input .docx packages into a host package as altChunk parts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, MutableMapping
from xml.parsers.expat import ExpatError

from defusedxml import DefusedXmlException

from .error_handling import MalformedSkeletonError, MarkerNotFoundError
from .logger import get_logger
from .skeleton_renderer import MARKER_PREFIX, placeholder_text
from .utilities import XMLEditor, element_children, find_by_local_name, local_name

LOGGER = get_logger(__name__)

CONTENT_TYPES_PATH = "[Content_Types].xml"
DOCUMENT_PATH = "word/document.xml"
DOCUMENT_RELS_PATH = "word/_rels/document.xml.rels"

CHUNK_DIR = "word"
CHUNK_EXTENSION = "docx"

ALTCHUNK_CONTENT_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"
)
ALTCHUNK_REL_TYPE = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/aFChunk"
)
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
CHUNK_PART_RE = re.compile(rf"^/?{CHUNK_DIR}/chunk_\d+\.{CHUNK_EXTENSION}$")


@dataclass(frozen=True)
class InputDocument:
    """One source package in the merge sequence."""

    data: bytes
    index: int
    name: str = ""

    @classmethod
    def from_path(cls, path: str | Path, index: int) -> "InputDocument":
        path = Path(path)
        return cls(data=path.read_bytes(), index=index, name=path.name)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class EmbeddedChunk:
    """Where an input ended up inside the host package."""

    index: int
    name: str
    part_name: str
    r_id: str
    size: int


def chunk_file_name(index: int) -> str:
    return f"chunk_{index}.{CHUNK_EXTENSION}"


def chunk_part_name(index: int) -> str:
    return f"{CHUNK_DIR}/{chunk_file_name(index)}"


def is_chunk_part(part_name: str) -> bool:
    return bool(CHUNK_PART_RE.match(part_name))


class HostDocument:
    """Edit the members of an unpacked host package to reference altChunk parts."""

    def __init__(self, parts: MutableMapping[str, bytes]):
        self.parts = parts
        self._editors: Dict[str, XMLEditor] = {}
        try:
            self.content_types = self._open(CONTENT_TYPES_PATH)
            self.rels = self._open(DOCUMENT_RELS_PATH)
            self.main = self._open(DOCUMENT_PATH)
        except MalformedSkeletonError:
            self.close()
            raise

        self.body = self._find_body()
        self._ensure_relationship_namespace()

    def embed(self, document: InputDocument) -> EmbeddedChunk:
        index = document.index
        part_name = chunk_part_name(index)
        if part_name in self.parts:
            raise MalformedSkeletonError(f"Host package already contains {part_name}")

        self.parts[part_name] = document.data
        self._append_content_type_override(part_name)
        r_id = self._append_relationship(index)
        self._replace_placeholder(index, r_id)

        LOGGER.debug("Embedded %s as %s (%s)", document.name or f"#{index}", part_name, r_id)
        return EmbeddedChunk(
            index=index,
            name=document.name,
            part_name=part_name,
            r_id=r_id,
            size=document.size,
        )

    def embed_all(self, documents: Iterable[InputDocument]) -> List[EmbeddedChunk]:
        ordered = sorted(documents, key=lambda doc: doc.index)
        return [self.embed(document) for document in ordered]

    def verify_chunks(self) -> dict:
        overrides = [
            node for node in find_by_local_name(self.content_types.dom, "Override")
            if is_chunk_part(node.getAttribute("PartName"))
        ]
        relationships = [
            node for node in find_by_local_name(self.rels.dom, "Relationship")
            if node.getAttribute("Type") == ALTCHUNK_REL_TYPE
        ]
        references = [
            node for node in element_children(self.body) if local_name(node) == "altChunk"
        ]
        residual = [
            node for node in find_by_local_name(self.main.dom, "p")
            if MARKER_PREFIX in paragraph_text(node)
        ]
        return {
            "overrides": len(overrides),
            "relationships": len(relationships),
            "references": len(references),
            "residual_markers": len(residual),
            "reference_ids": [node.getAttribute("r:id") for node in references],
        }

    def save(self) -> MutableMapping[str, bytes]:
        for part_name, editor in self._editors.items():
            self.parts[part_name] = editor.to_bytes()
        return self.parts

    def close(self) -> None:
        for editor in self._editors.values():
            editor.close()
        self._editors.clear()

    def __enter__(self) -> "HostDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _open(self, part_name: str) -> XMLEditor:
        data = self.parts.get(part_name)
        if data is None:
            raise MalformedSkeletonError(f"Required part missing from host package: {part_name}")
        try:
            editor = XMLEditor(part_name, data)
        except (ExpatError, DefusedXmlException) as exc:
            raise MalformedSkeletonError(f"Invalid XML in {part_name}: {exc}") from exc
        self._editors[part_name] = editor
        return editor

    def _find_body(self):
        bodies = find_by_local_name(self.main.dom, "body")
        if not bodies:
            self.close()
            raise MalformedSkeletonError(f"No w:body element in {DOCUMENT_PATH}")
        return bodies[0]

    def _ensure_relationship_namespace(self) -> None:
        root = self.main.root
        if not root.hasAttribute("xmlns:r"):
            root.setAttribute("xmlns:r", R_NS)

    def _append_content_type_override(self, part_name: str) -> None:
        dom = self.content_types.dom
        override = dom.createElement("Override")
        override.setAttribute("PartName", f"/{part_name}")
        override.setAttribute("ContentType", ALTCHUNK_CONTENT_TYPE)
        self.content_types.root.appendChild(override)

    def _append_relationship(self, index: int) -> str:
        dom = self.rels.dom
        r_id = _mint_relationship_id(dom, index)
        rel = dom.createElement("Relationship")
        rel.setAttribute("Id", r_id)
        rel.setAttribute("Type", ALTCHUNK_REL_TYPE)
        rel.setAttribute("Target", chunk_file_name(index))
        self.rels.root.appendChild(rel)
        return r_id

    def _replace_placeholder(self, index: int, r_id: str) -> None:
        marker = placeholder_text(index)
        position = self.main.find_child_index(
            self.body,
            lambda node: local_name(node) == "p" and paragraph_text(node) == marker,
        )
        if position is None:
            raise MarkerNotFoundError(index, marker)

        alt_chunk = self.main.dom.createElement("w:altChunk")
        alt_chunk.setAttribute("r:id", r_id)
        self.main.replace_child_at(self.body, position, alt_chunk)


def paragraph_text(paragraph) -> str:
    text_parts = []
    for text_node in find_by_local_name(paragraph, "t"):
        for child in text_node.childNodes:
            if child.nodeType == child.TEXT_NODE:
                text_parts.append(child.nodeValue)
    return "".join(text_parts)


def _mint_relationship_id(dom, index: int) -> str:
    taken = {rel.getAttribute("Id") for rel in find_by_local_name(dom, "Relationship")}
    candidate = f"rIdAltChunk{index}"
    suffix = 1
    while candidate in taken:
        candidate = f"rIdAltChunk{index}_{suffix}"
        suffix += 1
    return candidate
