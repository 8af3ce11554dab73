#!/usr/bin/env python3
"""Unpack a .docx package held in memory into a member table."""

import io
import zipfile
from typing import Dict


def unpack_document(data: bytes) -> Dict[str, bytes]:
    """
    Read every member of a .docx package.

    Args:
        data: Raw bytes of the .docx archive

    Returns:
        dict: Member name to member bytes, in archive order
    """
    with zipfile.ZipFile(io.BytesIO(data), "r") as archive:
        return {
            info.filename: archive.read(info)
            for info in archive.infolist()
            if not info.is_dir()
        }
