#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Run lightweight validation on a merged .docx package."""

from __future__ import annotations

import argparse
import sys
import zipfile
from pathlib import Path

from .unpack import unpack_document
from .validation import AltChunkValidator


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate altChunk references in a merged .docx")
    parser.add_argument("document", help="Merged .docx file")
    parser.add_argument("--expected", type=int, default=None, help="Expected number of embedded documents")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    args = parser.parse_args(argv)

    doc_path = Path(args.document)
    if not doc_path.is_file():
        print(f"Error: {doc_path} is not a file")
        return 1
    if doc_path.suffix.lower() != ".docx":
        print(f"Error: validation not supported for {doc_path.suffix}")
        return 1

    try:
        parts = unpack_document(doc_path.read_bytes())
    except zipfile.BadZipFile as exc:
        print(f"Error: invalid zip file: {exc}")
        return 1

    validator = AltChunkValidator(parts, verbose=args.verbose, expected_count=args.expected)
    if not validator.validate():
        for error in validator.errors:
            print(f"✗ {error}")
        return 1

    print(f"✓ {len(validator.reference_ids)} embedded document(s), validation completed successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
