from datetime import date

import pytest

from app.errors import InvalidInputError
from app.models import HeadingLevel
from app.services import read_wireframe, insert_prompt, build_html_page, page_filename

from helpers import texts, headings


H = HeadingLevel


@pytest.fixture
def wireframe(make_doc):
    return make_doc(
        ("Hero", H.H2),
        "not a heading",
        ("Buy", H.H4),
        ("New", H.H5),
    )


# --- read_wireframe ---

def test_read_wireframe(wireframe):
    readout = read_wireframe(wireframe)

    assert readout.text == "Hero\nBuy\nNew\n"
    assert readout.ux == "h2: Hero\nfeature or button: Buy\neyebrow: New\n"
    assert readout.html == "<h2>Hero</h2>\n<button>Buy</button>\n<label>New</label>\n"
    assert readout.headings == [H.H2, H.H4, H.H5]


def test_read_wireframe_up_to_cursor(wireframe):
    readout = read_wireframe(wireframe, up_to=2)
    assert readout.text == "Hero\nBuy\n"


def test_read_wireframe_includes_tables(make_doc):
    doc = make_doc(("Top", H.H1))
    table = doc.docx.add_table(rows=1, cols=2)
    table.cell(0, 0).paragraphs[0].text = "Card"
    table.cell(0, 0).paragraphs[0].style = "Heading 3"
    table.cell(0, 1).paragraphs[0].text = "plain"

    readout = read_wireframe(doc)

    assert readout.ux == "Top\nh3: Card\n"


def test_read_wireframe_rejects_negative_cursor(wireframe):
    with pytest.raises(InvalidInputError):
        read_wireframe(wireframe, up_to=-1)


# --- insert_prompt ---

def test_insert_prompt_after_block(make_doc):
    doc = make_doc("A", "B")
    result = insert_prompt(doc, "line one\n\n  line two  ", title="Prompt", after=0)

    assert result.success
    assert result.inserted_paragraphs == 3
    assert texts(doc) == ["A", "", "Prompt", "---", "line one", "", "line two", "", "B"]
    assert headings(doc)[2] is H.H3


def test_insert_prompt_at_end_without_title(make_doc):
    doc = make_doc("A")
    result = insert_prompt(doc, "do the thing")

    assert result.success
    assert texts(doc) == ["A", "", "do the thing", ""]


def test_insert_prompt_requires_content(make_doc):
    doc = make_doc("A")
    result = insert_prompt(doc, "")

    assert not result.success
    assert "No prompt content" in result.error
    assert texts(doc) == ["A"]


# --- build_html_page ---

def test_build_html_page(wireframe):
    page = build_html_page(wireframe, title="Landing <v2>", generated_on=date(2024, 5, 1))

    assert page.startswith("<!DOCTYPE html>")
    assert "<title>Landing &lt;v2&gt;</title>" in page
    assert "<h2>Hero</h2>\n<button>Buy</button>\n<label>New</label>" in page
    assert "Generated on 2024-05-01" in page


def test_build_html_page_needs_headings(make_doc):
    with pytest.raises(InvalidInputError):
        build_html_page(make_doc("just text"))


def test_page_filename():
    assert page_filename("My Page!") == "My_Page_.html"
    assert page_filename("") == "wireframe.html"
