"""
Shared fixtures: real .docx inputs built with python-docx and helpers for
reading members back out of a produced package.
"""
import io
import zipfile

import defusedxml.ElementTree as ET
import pytest
from docx import Document

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
CT_NS = "http://schemas.openxmlformats.org/package/2006/content-types"
PR_NS = "http://schemas.openxmlformats.org/package/2006/relationships"


def make_docx(*paragraphs, table_rows=0):
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table_rows:
        table = doc.add_table(rows=table_rows, cols=2)
        for row_index, row in enumerate(table.rows):
            row.cells[0].text = f"r{row_index}c0"
            row.cells[1].text = f"r{row_index}c1"
    stream = io.BytesIO()
    doc.save(stream)
    return stream.getvalue()


def read_members(data):
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        return {name: archive.read(name) for name in archive.namelist()}


def parse_member(data, name):
    return ET.fromstring(read_members(data)[name])


def body_children(data):
    """(local-name, element) pairs for the direct children of w:body."""
    root = parse_member(data, "word/document.xml")
    body = root.find(f"{{{W_NS}}}body")
    return [(child.tag.split("}")[-1], child) for child in body]


def is_page_break(paragraph):
    breaks = paragraph.findall(f".//{{{W_NS}}}br")
    return bool(breaks) and all(br.get(f"{{{W_NS}}}type") == "page" for br in breaks)


def paragraph_text(paragraph):
    return "".join(t.text or "" for t in paragraph.iter(f"{{{W_NS}}}t"))


@pytest.fixture
def docx_factory():
    return make_docx


@pytest.fixture
def doc_a():
    return make_docx("Alpha document", "Second paragraph of A", table_rows=3)


@pytest.fixture
def doc_b():
    return make_docx("Beta document")


@pytest.fixture
def doc_c():
    return make_docx("Gamma document", "More text")
