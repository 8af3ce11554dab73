import io
import zipfile

import pytest

from docx_merge.ooxml import pack_document, unpack_document, validate_document
from docx_merge.ooxml.validation import AltChunkValidator, DOCXSchemaValidator
from docx_merge.skeleton_renderer import render_skeleton_docx
from docx_merge.workflow import merge


def test_pack_unpack_preserves_members():
    parts = unpack_document(render_skeleton_docx(2))

    repacked = unpack_document(pack_document(parts))

    assert repacked == parts


def test_content_types_written_first():
    parts = {"word/document.xml": b"<a/>", "[Content_Types].xml": b"<Types/>"}

    with zipfile.ZipFile(io.BytesIO(pack_document(parts))) as archive:
        assert archive.namelist() == ["[Content_Types].xml", "word/document.xml"]


def test_pack_only_writes_docx():
    with pytest.raises(TypeError):
        pack_document({}, suffix=".xlsx")


def test_validation_checks_docx_members():
    parts = unpack_document(render_skeleton_docx(1))
    del parts["word/document.xml"]

    errors = validate_document(pack_document(parts))

    assert errors == ["missing files: ['word/document.xml']"]


def test_validation_reports_missing_members():
    data = pack_document({"[Content_Types].xml": b"<Types/>"})

    assert validate_document(data)
    with pytest.raises(ValueError):
        pack_document({"[Content_Types].xml": b"<Types/>"}, validate=True)


def test_validation_reports_broken_xml():
    parts = unpack_document(render_skeleton_docx(1))
    parts["word/document.xml"] = b"<w:document"

    errors = validate_document(pack_document(parts))

    assert errors and "word/document.xml" in errors[0]


def test_validation_reports_bad_zip():
    assert validate_document(b"definitely not a zip")


def test_docx_validator_on_skeleton():
    parts = unpack_document(render_skeleton_docx(1))

    assert DOCXSchemaValidator(parts).validate()

    del parts["word/settings.xml"]
    validator = DOCXSchemaValidator(parts)
    assert not validator.validate()
    assert "word/settings.xml" in validator.errors[0]


def test_altchunk_validator_on_merged_package(doc_a, doc_b):
    parts = unpack_document(merge([(doc_a, 0, "a"), (doc_b, 1, "b")]))

    validator = AltChunkValidator(parts, expected_count=2)

    assert validator.validate()
    assert validator.reference_ids == ["rIdAltChunk0", "rIdAltChunk1"]


def test_altchunk_validator_requires_update_fields(doc_a):
    parts = unpack_document(merge([(doc_a, 0, "a")], update_fields=False))

    assert not AltChunkValidator(parts).validate()
    assert AltChunkValidator(parts, require_update_fields=False).validate()


def test_altchunk_validator_detects_missing_override(doc_a):
    parts = unpack_document(merge([(doc_a, 0, "a")]))
    parts["[Content_Types].xml"] = parts["[Content_Types].xml"].replace(
        b'PartName="/word/chunk_0.docx"', b'PartName="/word/other.docx"'
    )

    validator = AltChunkValidator(parts)

    assert not validator.validate()
    assert any("/word/chunk_0.docx" in error for error in validator.errors)
