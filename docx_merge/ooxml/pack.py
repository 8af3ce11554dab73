#!/usr/bin/env python3
"""
Pack an in-memory member table into a .docx archive.
"""

import io
import zipfile
from typing import List, Mapping

import defusedxml.ElementTree as ET

from ..logger import get_logger

LOGGER = get_logger(__name__)

CONTENT_TYPES_PATH = "[Content_Types].xml"

DOCX_REQUIRED = ["[Content_Types].xml", "word/document.xml", "word/_rels/document.xml.rels"]


def pack_document(parts: Mapping[str, bytes], validate: bool = False) -> bytes:
    """
    Pack package members into a .docx archive.

    Args:
        parts: Member name to member bytes
        validate: If True, run lightweight structural checks on the result

    Returns:
        bytes: The deflate-compressed archive

    Raises:
        ValueError: Validation failed
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name in _member_order(parts):
            archive.writestr(name, parts[name])
    data = buffer.getvalue()

    if validate:
        errors = validate_document(data)
        if errors:
            raise ValueError(f"Packed document failed validation: {errors}")

    return data


def validate_document(data: bytes) -> List[str]:
    """Lightweight validation: required members exist and their XML parses."""
    required = DOCX_REQUIRED

    try:
        with zipfile.ZipFile(io.BytesIO(data), "r") as archive:
            names = set(archive.namelist())
            missing = [name for name in required if name not in names]
            if missing:
                return [f"missing files: {missing}"]

            for name in required:
                if name.endswith((".xml", ".rels")):
                    with archive.open(name) as handle:
                        try:
                            ET.parse(handle)
                        except ET.ParseError as exc:
                            LOGGER.warning("Invalid XML in %s: %s", name, exc)
                            return [f"invalid XML in {name}: {exc}"]
    except zipfile.BadZipFile as exc:
        return [f"invalid zip file: {exc}"]

    return []


def _member_order(parts: Mapping[str, bytes]) -> List[str]:
    # [Content_Types].xml is always the first member
    names = [name for name in parts if name != CONTENT_TYPES_PATH]
    if CONTENT_TYPES_PATH in parts:
        names.insert(0, CONTENT_TYPES_PATH)
    return names
