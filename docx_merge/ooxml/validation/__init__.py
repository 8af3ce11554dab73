"""Validator exports for lightweight OOXML checks."""

from .altchunk import AltChunkValidator
from .docx import DOCXSchemaValidator

__all__ = [
    "AltChunkValidator",
    "DOCXSchemaValidator",
]
