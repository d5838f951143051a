"""Unit tests for core/utils/slug.py"""

import pytest

from mdsite.core.utils.slug import slugify


@pytest.mark.parametrize("text,expected", [
    ("Hello World", "hello-world"),
    ("my_file_name", "my-file-name"),
    ("  leading and trailing  ", "leading-and-trailing"),
    ("multiple---hyphens", "multiple-hyphens"),
    ("Special! Ch@rs#", "special-chrs"),
    ("", ""),
])
def test_slugify_basic(text, expected):
    """slugify converts text to lowercase hyphenated slug."""
    assert slugify(text) == expected


def test_slugify_preserves_hyphens():
    """slugify keeps existing hyphens intact."""
    assert slugify("already-slugified") == "already-slugified"


def test_slugify_keeps_non_latin_words():
    """Word characters from other scripts survive."""
    assert slugify("日本語 見出し") == "日本語-見出し"


def test_slugify_normalizes_fullwidth():
    """NFKC folds full-width letters before lowercasing."""
    assert slugify("ＡＢＣ") == "abc"
