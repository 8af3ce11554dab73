"""Lightweight validation helpers for .docx packages held in memory."""

from __future__ import annotations

from typing import Iterable, List, Mapping

import defusedxml.ElementTree as ET

from ...logger import get_logger

LOGGER = get_logger(__name__)


class BaseValidator:
    """Basic structural checks for unpacked .docx packages."""

    required_files: Iterable[str] = ()

    def __init__(self, parts: Mapping[str, bytes], verbose: bool = False):
        self.parts = parts
        self.verbose = verbose
        self.errors: List[str] = []

    def validate(self) -> bool:
        if not self._check_required_files(self.required_files):
            return False
        return self._parse_xml_files(self.required_files)

    def _report(self, message: str) -> None:
        self.errors.append(message)
        if self.verbose:
            LOGGER.warning("%s: %s", type(self).__name__, message)

    def _check_required_files(self, rel_paths: Iterable[str]) -> bool:
        missing = [p for p in rel_paths if p not in self.parts]
        if missing:
            self._report(f"Missing required files: {missing}")
            return False
        return True

    def _parse_xml_files(self, rel_paths: Iterable[str]) -> bool:
        for rel_path in rel_paths:
            if not rel_path.endswith((".xml", ".rels")):
                continue
            try:
                ET.fromstring(self.parts[rel_path])
            except ET.ParseError as exc:
                self._report(f"Invalid XML in {rel_path}: {exc}")
                return False
        return True
