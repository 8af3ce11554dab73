"""Cross-reference checks for packages carrying altChunk parts."""

from __future__ import annotations

import posixpath
from typing import List, Mapping, Optional

from ...document import (
    ALTCHUNK_CONTENT_TYPE,
    ALTCHUNK_REL_TYPE,
    CONTENT_TYPES_PATH,
    DOCUMENT_PATH,
    DOCUMENT_RELS_PATH,
    is_chunk_part,
    paragraph_text,
)
from ...skeleton_renderer import MARKER_PREFIX
from ...utilities import XMLEditor, element_children, find_by_local_name, local_name
from .docx import DOCXSchemaValidator

SETTINGS_PATH = "word/settings.xml"


class AltChunkValidator(DOCXSchemaValidator):
    """
    Check that every altChunk reference in the body resolves through the
    relationship graph to an embedded member with a content-type override,
    and that no placeholder text survived.
    """

    def __init__(
        self,
        parts: Mapping[str, bytes],
        verbose: bool = False,
        expected_count: Optional[int] = None,
        require_update_fields: bool = True,
    ):
        super().__init__(parts, verbose=verbose)
        self.expected_count = expected_count
        self.require_update_fields = require_update_fields
        self.reference_ids: List[str] = []

    def validate(self) -> bool:
        if not super().validate():
            return False

        editors = {
            name: XMLEditor(name, self.parts[name])
            for name in (CONTENT_TYPES_PATH, DOCUMENT_RELS_PATH, DOCUMENT_PATH, SETTINGS_PATH)
        }
        try:
            self._check_references(editors)
            if self.require_update_fields:
                self._check_update_fields(editors[SETTINGS_PATH])
        finally:
            for editor in editors.values():
                editor.close()
        return not self.errors

    def _check_references(self, editors) -> None:
        overrides = {
            node.getAttribute("PartName"): node.getAttribute("ContentType")
            for node in find_by_local_name(editors[CONTENT_TYPES_PATH].dom, "Override")
        }
        chunk_overrides = [name for name in overrides if is_chunk_part(name)]
        relationships = {
            node.getAttribute("Id"): node.getAttribute("Target")
            for node in find_by_local_name(editors[DOCUMENT_RELS_PATH].dom, "Relationship")
            if node.getAttribute("Type") == ALTCHUNK_REL_TYPE
        }

        main = editors[DOCUMENT_PATH]
        bodies = find_by_local_name(main.dom, "body")
        if not bodies:
            self._report(f"No w:body element in {DOCUMENT_PATH}")
            return
        self.reference_ids = [
            node.getAttribute("r:id")
            for node in element_children(bodies[0])
            if local_name(node) == "altChunk"
        ]
        count = len(self.reference_ids)

        if self.expected_count is not None and count != self.expected_count:
            self._report(f"Expected {self.expected_count} altChunk references, found {count}")
        if len(set(self.reference_ids)) != count:
            self._report(f"Duplicate altChunk references: {self.reference_ids}")
        if len(relationships) != count or len(chunk_overrides) != count:
            self._report(
                f"Mismatched counts: {count} references, "
                f"{len(relationships)} relationships, {len(chunk_overrides)} overrides"
            )

        base_dir = posixpath.dirname(DOCUMENT_PATH)
        for r_id in self.reference_ids:
            target = relationships.get(r_id)
            if target is None:
                self._report(f"altChunk {r_id} has no aFChunk relationship")
                continue
            part_name = posixpath.normpath(posixpath.join(base_dir, target))
            if part_name not in self.parts:
                self._report(f"Relationship {r_id} targets missing member {part_name}")
            if overrides.get(f"/{part_name}") != ALTCHUNK_CONTENT_TYPE:
                self._report(f"No altChunk content-type override for /{part_name}")

        residual = [
            text
            for text in (paragraph_text(node) for node in find_by_local_name(main.dom, "p"))
            if MARKER_PREFIX in text
        ]
        if residual:
            self._report(f"Residual placeholder text: {residual}")

    def _check_update_fields(self, settings: XMLEditor) -> None:
        flag = settings.get_node("w:updateFields")
        if flag is None or flag.getAttribute("w:val") not in ("true", "1", "on"):
            self._report("word/settings.xml does not request field update on open")
