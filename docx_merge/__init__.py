"""Merge .docx packages by embedding each one as an altChunk part."""

from .document import EmbeddedChunk, HostDocument, InputDocument
from .error_handling import (
    EmptyInputError,
    InvalidInputError,
    MalformedSkeletonError,
    MarkerNotFoundError,
    MergeError,
    PackagingError,
    SkeletonConstructionError,
)
from .skeleton_renderer import placeholder_text, render_skeleton_docx
from .workflow import DOCX_MIME_TYPE, DocxMergeWorkflow, MergedPackage, merge, merge_documents

__all__ = [
    "DOCX_MIME_TYPE",
    "DocxMergeWorkflow",
    "EmbeddedChunk",
    "EmptyInputError",
    "InvalidInputError",
    "HostDocument",
    "InputDocument",
    "MalformedSkeletonError",
    "MarkerNotFoundError",
    "MergeError",
    "MergedPackage",
    "PackagingError",
    "SkeletonConstructionError",
    "merge",
    "merge_documents",
    "placeholder_text",
    "render_skeleton_docx",
]
