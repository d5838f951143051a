"""Unit tests for core/content.py"""

import pytest

from mdsite.core.content import extract_description, extract_page, extract_title
from mdsite.core.links import rewrite_links
from mdsite.errors import MissingTitle


def test_title_from_metadata_wins(make_doc, sample_md):
    """Metadata title is used verbatim even when an h1 exists."""
    title = extract_title(make_doc(sample_md))
    assert title.markdown == "Sample *Doc*"
    assert title.html == "Sample <em>Doc</em>"


def test_title_from_first_h1(make_doc):
    doc = make_doc("Intro text.\n\n## Not this\n\n# Hello *world*\n\n# Second\n")
    title = extract_title(doc)
    assert title.markdown == "Hello *world*"
    assert title.html == "Hello <em>world</em>"


def test_title_missing_raises(make_doc):
    with pytest.raises(MissingTitle) as exc:
        extract_title(make_doc("## Only h2\n\nBody.\n", path="notitle.md"))
    assert exc.value.path == "notitle.md"


def test_title_sees_rewritten_links(make_doc):
    """Titles extracted after link rewriting carry the public URL."""
    doc = make_doc("# See [contact](../contact.md)\n", path="notes/page.md")
    rewrite_links(doc)
    title = extract_title(doc)
    assert title.markdown == "See [contact](/contact)"
    assert title.html == 'See <a href="/contact">contact</a>'


def test_description_from_metadata(make_doc):
    doc = make_doc("---\ndescription: Short *summary*\n---\n# T\n\nFirst para.\n")
    desc = extract_description(doc)
    assert desc.markdown == "Short *summary*"
    assert desc.html == "<p>Short <em>summary</em></p>\n"


def test_description_from_first_paragraph(make_doc, sample_md):
    desc = extract_description(make_doc(sample_md))
    assert desc.markdown == "A paragraph with **bold** text and a [link](other.md)."
    assert "<strong>bold</strong>" in desc.html


def test_description_absent(make_doc):
    assert extract_description(make_doc("# Title only\n")) is None


def test_extract_page(make_doc, sample_md):
    page = extract_page(make_doc(sample_md, path="notes.md"))
    assert page.path == "notes.md"
    assert page.tags == ["python", "notes"]
    assert page.markdown == sample_md
    assert "<h2" in page.html
    assert "<li>item one</li>" in page.html


def test_title_keeps_backslash_escapes(make_doc):
    """Escaped emphasis characters stay literal in both title forms."""
    title = extract_title(make_doc("# Using \\_\\_init\\_\\_ and 2 \\* 3 \\* 4\n"))
    assert title.markdown == "Using \\_\\_init\\_\\_ and 2 \\* 3 \\* 4"
    assert title.html == "Using __init__ and 2 * 3 * 4"


def test_description_keeps_backslash_escapes(make_doc):
    desc = extract_description(make_doc("# T\n\nLiteral \\[brackets\\] and \\`ticks\\`.\n"))
    assert desc.markdown == "Literal \\[brackets\\] and \\`ticks\\`."
    assert desc.html == "<p>Literal [brackets] and `ticks`.</p>\n"
