"""Tests for text normalization and escaping."""

import pytest

from formrelay.sanitizer import escape, normalize, slugify


def unescape(text):
    return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


def test_normalize_trims_strings():
    assert normalize("  Acme  ") == "Acme"


@pytest.mark.parametrize("value", [None, 42, 3.5, ["a"], {"a": 1}, True])
def test_normalize_non_strings_become_empty(value):
    assert normalize(value) == ""


def test_escape_replaces_markup_characters():
    assert escape(" <b>Tom & Jerry</b> ") == "&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;"


def test_escape_escapes_existing_entities_again():
    assert escape("&lt;") == "&amp;lt;"


@pytest.mark.parametrize(
    "text",
    [
        "<script>alert('x')</script>",
        "a && b > c < d",
        "&amp; already",
        "plain text",
        "  <<>>&&  ",
    ],
)
def test_escape_output_is_markup_free_and_reversible(text):
    escaped = escape(text)
    assert "<" not in escaped
    assert ">" not in escaped
    # every ampersand starts one of the three entities
    assert escaped.count("&") == escaped.count("&amp;") + escaped.count("&lt;") + escaped.count("&gt;")
    assert unescape(escaped) == normalize(text)


def test_slugify_lowercases_and_hyphenates():
    assert slugify("  Cloud   Hosting Plus ") == "cloud-hosting-plus"
    assert slugify(None) == ""
