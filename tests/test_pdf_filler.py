import fitz
import pytest

from placement_designer.models import FieldDef
from placement_designer.pdf_filler import display_value, fill_template, wrap_text


@pytest.fixture()
def template_pdf(tmp_path):
    path = tmp_path / "template.pdf"
    doc = fitz.open()
    doc.new_page(width=595, height=842)
    doc.new_page(width=842, height=595)
    doc.save(str(path))
    doc.close()
    return str(path)


def _page_text(path, index):
    doc = fitz.open(path)
    try:
        return doc[index].get_text()
    finally:
        doc.close()


def test_fill_stamps_values(template_pdf, tmp_path, make_placement):
    out = str(tmp_path / "filled.pdf")
    placements = [
        make_placement("a", field_key="name", rect=(0.1, 0.1, 0.5, 0.05)),
        make_placement("b", field_key="city", page_index=1, rect=(0.2, 0.2, 0.5, 0.08)),
    ]
    filled, skipped = fill_template(template_pdf, placements,
                                    {"name": "Ada Lovelace", "city": "London"}, out)
    assert (filled, skipped) == (2, 0)
    assert "Ada Lovelace" in _page_text(out, 0)
    assert "London" in _page_text(out, 1)


def test_out_of_range_pages_are_skipped(template_pdf, tmp_path, make_placement):
    out = str(tmp_path / "filled.pdf")
    placements = [
        make_placement("a", field_key="name", page_index=5),
        make_placement("b", field_key="name"),
    ]
    assert fill_template(template_pdf, placements, {"name": "X"}, out) == (1, 1)


def test_missing_values_leave_placement_blank(template_pdf, tmp_path, make_placement):
    out = str(tmp_path / "filled.pdf")
    placements = [make_placement("a", field_key="name"), make_placement("b", field_key="dob")]
    assert fill_template(template_pdf, placements, {"name": ""}, out) == (0, 0)


def test_multiline_wraps_inside_box(template_pdf, tmp_path, make_placement):
    out = str(tmp_path / "filled.pdf")
    p = make_placement("a", field_key="notes", rect=(0.1, 0.1, 0.3, 0.2))
    p.style.multiline = True
    text = "one two three four five six seven eight nine ten eleven twelve"
    fill_template(template_pdf, [p], {"notes": text}, out)
    words = _page_text(out, 0).split()
    assert words[:3] == ["one", "two", "three"]


def test_single_line_collapses_newlines(template_pdf, tmp_path, make_placement):
    out = str(tmp_path / "filled.pdf")
    p = make_placement("a", field_key="addr", rect=(0.1, 0.1, 0.8, 0.05))
    fill_template(template_pdf, [p], {"addr": "1 Main St\nSpringfield"}, out)
    assert "1 Main St Springfield" in _page_text(out, 0)


def test_display_value_by_field_type():
    assert display_value(True, "boolean") == "Yes"
    assert display_value(False, "boolean") == "No"
    assert display_value({"a": 1}, "object") == '{"a": 1}'
    assert display_value(None) == ""
    assert display_value(42) == "42"


def test_field_types_are_applied(template_pdf, tmp_path, make_placement):
    out = str(tmp_path / "filled.pdf")
    p = make_placement("a", field_key="agree", rect=(0.1, 0.1, 0.5, 0.05))
    fill_template(template_pdf, [p], {"agree": True}, out,
                  fields=[FieldDef("agree", type="boolean")])
    assert "Yes" in _page_text(out, 0)


def test_wrap_text_splits_long_words():
    font = fitz.Font("helv")
    lines = wrap_text(font, "a " + "x" * 80, 12, 100)
    assert lines[0] == "a"
    assert all(font.text_length(line, fontsize=12) <= 100 for line in lines)
    assert "".join(lines[1:]) == "x" * 80
