"""Tests for page title extraction."""

from __future__ import annotations

import pytest

from chmdocset.ingest.title import extract_title, normalize_title


def test_extract_simple_title():
    assert extract_title("<html><head><title>Welcome</title></head></html>") == "Welcome"


def test_extract_case_insensitive_with_attributes():
    assert extract_title('<TITLE lang="en">Overview</TITLE>') == "Overview"


def test_extract_first_title_wins():
    text = "<title>First</title><svg><title>Second</title></svg>"
    assert extract_title(text) == "First"


def test_extract_unescapes_entities():
    assert extract_title("<title>Tom &amp; Jerry &#8212; &quot;Intro&quot;</title>") == (
        'Tom & Jerry — "Intro"'
    )


def test_extract_collapses_whitespace():
    text = "<title>\n\t  Getting   started\r\n with\tthe  API  \n</title>"
    assert extract_title(text) == "Getting started with the API"


def test_extract_collapses_nbsp():
    assert extract_title("<title>A&nbsp;&nbsp;B</title>") == "A B"


def test_extract_stops_at_next_tag():
    assert extract_title("<title>Part one<br>part two</title>") == "Part one"


@pytest.mark.parametrize(
    "text",
    [
        "<html><head></head><body>No title here</body></html>",
        "<title></title>",
        "<title>   \n\t </title>",
        "<title>Unterminated title with no closing markup",
        "<titles>Not a title</titles>",
    ],
)
def test_extract_no_title(text):
    assert extract_title(text) is None


def test_normalize_title_trims():
    assert normalize_title("  a  b  ") == "a b"
