import pytest
from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from conftest import W_NS, body_children, is_page_break, paragraph_text, parse_member
from docx_merge import skeleton_renderer
from docx_merge.error_handling import EmptyInputError, SkeletonConstructionError
from docx_merge.skeleton_renderer import placeholder_text, render_skeleton_docx


def _content(data):
    return [(name, node) for name, node in body_children(data) if name != "sectPr"]


def test_placeholder_text():
    assert placeholder_text(0) == "__ALTCHUNK_0__"
    assert placeholder_text(12) == "__ALTCHUNK_12__"


def test_placeholders_in_order_separated_by_page_breaks():
    content = _content(render_skeleton_docx(3))

    assert [name for name, _ in content] == ["p"] * 5
    texts = [paragraph_text(node) for _, node in content]
    assert texts[0::2] == ["__ALTCHUNK_0__", "__ALTCHUNK_1__", "__ALTCHUNK_2__"]
    assert all(is_page_break(node) for _, node in content[1::2])
    assert not any(is_page_break(node) for _, node in content[0::2])


def test_single_input_has_no_page_break():
    content = _content(render_skeleton_docx(1))

    assert len(content) == 1
    assert paragraph_text(content[0][1]) == "__ALTCHUNK_0__"
    assert not is_page_break(content[0][1])


def test_page_breaks_can_be_disabled():
    content = _content(render_skeleton_docx(2, page_breaks=False))

    assert [paragraph_text(node) for _, node in content] == ["__ALTCHUNK_0__", "__ALTCHUNK_1__"]


def test_each_placeholder_appears_exactly_once():
    content = _content(render_skeleton_docx(4))
    texts = [paragraph_text(node) for _, node in content]

    for index in range(4):
        assert texts.count(placeholder_text(index)) == 1


def test_update_fields_requested_in_settings():
    settings = parse_member(render_skeleton_docx(2), "word/settings.xml")
    flag = settings.find(f"{{{W_NS}}}updateFields")

    assert flag is not None
    assert flag.get(f"{{{W_NS}}}val") == "true"


def test_update_fields_precedes_every_successor():
    settings = parse_member(render_skeleton_docx(1), "word/settings.xml")
    names = [child.tag.split("}")[-1] for child in settings]
    successors = {name.split(":")[1] for name in skeleton_renderer._UPDATE_FIELDS_SUCCESSORS}

    position = names.index("updateFields")
    following = [name for name in names if name in successors]
    assert following
    assert all(names.index(name) > position for name in following)


@pytest.mark.parametrize("successor", ["m:mathPr", "sl:schemaLibrary"])
def test_update_fields_inserted_before_foreign_namespace_successor(successor):
    doc = Document()
    settings = doc.settings.element
    for child in list(settings):
        settings.remove(child)
    settings.append(OxmlElement("w:zoom"))
    settings.append(OxmlElement(successor))

    skeleton_renderer._enable_update_fields(doc)

    assert [child.tag for child in settings] == [qn("w:zoom"), qn("w:updateFields"), qn(successor)]


def test_update_fields_can_be_disabled():
    settings = parse_member(render_skeleton_docx(1, update_fields=False), "word/settings.xml")

    assert settings.find(f"{{{W_NS}}}updateFields") is None


@pytest.mark.parametrize("count", [0, -1])
def test_no_inputs_fails_fast(count):
    with pytest.raises(EmptyInputError):
        render_skeleton_docx(count)


def test_build_failure_is_wrapped(monkeypatch):
    def broken_document():
        raise RuntimeError("template unavailable")

    monkeypatch.setattr(skeleton_renderer, "Document", broken_document)

    with pytest.raises(SkeletonConstructionError) as excinfo:
        render_skeleton_docx(2)
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert excinfo.value.kind == "SkeletonConstructionFailure"
