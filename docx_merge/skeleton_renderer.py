#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Render the host ("skeleton") DOCX that carries one placeholder per input.
"""

from __future__ import annotations

import io

from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from .error_handling import EmptyInputError, SkeletonConstructionError
from .logger import get_logger

LOGGER = get_logger(__name__)

MARKER_PREFIX = "__ALTCHUNK_"
PLACEHOLDER_TEMPLATE = MARKER_PREFIX + "{index}__"
DEFAULT_PAGE_BREAKS = True
DEFAULT_UPDATE_FIELDS = True

# w:settings children that must follow w:updateFields
_UPDATE_FIELDS_SUCCESSORS = (
    "w:hdrShapeDefaults", "w:footnotePr", "w:endnotePr", "w:compat",
    "w:docVars", "w:rsids", "m:mathPr", "w:attachedSchema", "w:themeFontLang",
    "w:clrSchemeMapping", "w:doNotIncludeSubdocsInStats",
    "w:doNotAutoCompressPictures", "w:forceUpgrade", "w:captions",
    "w:readModeInkLockDown", "w:smartTagType", "sl:schemaLibrary",
    "w:shapeDefaults", "w:doNotEmbedSmartTags", "w:decimalSymbol", "w:listSeparator",
)


def placeholder_text(index: int) -> str:
    return PLACEHOLDER_TEMPLATE.format(index=index)


def render_skeleton_docx(
    count: int,
    page_breaks: bool = DEFAULT_PAGE_BREAKS,
    update_fields: bool = DEFAULT_UPDATE_FIELDS,
) -> bytes:
    """
    Build a minimal DOCX whose body holds ``count`` placeholder paragraphs.

    A page-break paragraph precedes every placeholder except the first.
    No title, heading or table of contents is added.
    """
    if count < 1:
        raise EmptyInputError("No documents supplied to merge")

    try:
        doc = Document()
        doc._body.clear_content()

        for index in range(count):
            if index > 0 and page_breaks:
                doc.add_page_break()
            doc.add_paragraph(placeholder_text(index))

        if update_fields:
            _enable_update_fields(doc)

        stream = io.BytesIO()
        doc.save(stream)
    except Exception as exc:
        raise SkeletonConstructionError(f"Could not build host document: {exc}") from exc

    LOGGER.debug("Rendered skeleton with %d placeholder(s)", count)
    return stream.getvalue()


def _enable_update_fields(doc: Document) -> None:
    settings = doc.settings.element
    update_fields = settings.find(qn("w:updateFields"))
    if update_fields is None:
        update_fields = OxmlElement("w:updateFields")
        settings.insert_element_before(update_fields, *_UPDATE_FIELDS_SUCCESSORS)
    update_fields.set(qn("w:val"), "true")
