#!/usr/bin/env python3
"""
Tests for repository identifier resolution
"""

import pytest

from models import RepositoryRef
from resolver import resolve


def test_short_form():
    assert resolve("owner/name") == RepositoryRef("owner", "name")


def test_short_form_with_surrounding_whitespace_and_slashes():
    assert resolve("  /facebook/react/  ") == RepositoryRef("facebook", "react")


def test_url_with_extra_segments():
    """Only the first two path segments of a URL matter"""
    assert resolve("https://host/owner/name/extra") == RepositoryRef("owner", "name")
    assert resolve("https://github.com/octocat/Hello-World/tree/master/docs") == \
        RepositoryRef("octocat", "Hello-World")


def test_url_query_and_fragment_are_ignored():
    assert resolve("https://github.com/vercel/next.js?tab=readme#top") == RepositoryRef("vercel", "next.js")


def test_clone_url_drops_git_suffix():
    assert resolve("https://github.com/octocat/Hello-World.git") == RepositoryRef("octocat", "Hello-World")


@pytest.mark.parametrize("text", [
    "",
    "   ",
    None,
    "justowner",
    "a/b/c",
    "https://github.com/",
    "https://github.com/onlyowner",
    "http://[::1",
])
def test_rejected_inputs(text):
    assert resolve(text) is None


def test_ref_rejects_slashes_and_empty_parts():
    with pytest.raises(ValueError):
        RepositoryRef("own/er", "name")
    with pytest.raises(ValueError):
        RepositoryRef("owner", "")


def test_full_name():
    assert resolve("octocat/Hello-World").full_name == "octocat/Hello-World"
