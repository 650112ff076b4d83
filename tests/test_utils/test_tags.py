"""
Unit tests for tag extraction and filler filtering.
"""

import pytest

from trendscope.utils.tags import extract_tags, is_valid_tag, normalize_tag


def test_cleaning_example():
    raw = "|".join([
        "gaming",
        "NONE",
        "[n/a]",
        "x",
        "thisistoolongtobevalidasatagbecauseitexceedsthirtychars",
    ])

    assert extract_tags(raw, max_length=30) == ["gaming"]


def test_quotes_case_and_whitespace():
    assert extract_tags('"Minecraft"| " Let\'s Play "') == ["minecraft", "let's play"]


def test_normalize_tag():
    assert normalize_tag(' "Hello World" ') == "hello world"


@pytest.mark.parametrize("tag", [
    "none", "n/a", "null", "undefined", "no tag", "no tags", "notag",
    "notags", "empty", "blank", "[none]", "[null]", "[empty]", "[blank]",
    "[undefined]", "[notags]",
])
def test_filler_tokens_are_dropped(tag):
    assert not is_valid_tag(tag, 30)


@pytest.mark.parametrize("tag", ["none of this", "really none", "this none that"])
def test_none_as_a_word_is_dropped(tag):
    assert not is_valid_tag(tag, 30)


@pytest.mark.parametrize("tag", ["nonetheless", "anyone", "nonesuch tag"])
def test_none_inside_a_word_is_kept(tag):
    assert is_valid_tag(tag, 30)


def test_length_bounds():
    assert not is_valid_tag("ab", 30)
    assert is_valid_tag("abc", 30)
    assert is_valid_tag("a" * 29, 30)
    assert not is_valid_tag("a" * 30, 30)


def test_flow_length_is_stricter():
    tag = "a" * 26

    assert extract_tags(tag, max_length=30) == [tag]
    assert extract_tags(tag, max_length=25) == []


def test_per_row_limit_keeps_first_tags():
    raw = "|".join(f"tag{i:02d}" for i in range(12))

    assert extract_tags(raw, per_row_limit=8) == [f"tag{i:02d}" for i in range(8)]
    assert len(extract_tags(raw)) == 12


def test_empty_input():
    assert extract_tags("") == []
    assert extract_tags(None) == []
    assert extract_tags('"[none]"') == []
