# tests/utils/test_slug.py
"""Tests for content_api/utils/slug.py module."""

import pytest

from content_api.utils.slug import slugify, with_suffix


class TestSlugify:
    """Tests for slugify function."""

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Hello, World!", "hello-world"),
            ("  A -- B  ", "a-b"),
            ("Café Déjà Vu", "cafe-deja-vu"),
            ("Multiple   spaces\tand\nlines", "multiple-spaces-and-lines"),
            ("---Leading and trailing---", "leading-and-trailing"),
            ("Python 3.12 Release", "python-312-release"),
        ],
    )
    def test_examples(self, title: str, expected: str) -> None:
        assert slugify(title) == expected

    def test_only_symbols_gives_empty_slug(self) -> None:
        assert slugify("!!! ???") == ""

    def test_result_alphabet(self) -> None:
        slug = slugify("Ünïcödé — Title with ¿Symbols? & more")
        assert slug
        assert all(ch.isascii() and (ch.isalnum() or ch == "-") for ch in slug)
        assert slug == slug.lower()
        assert "--" not in slug
        assert not slug.startswith("-")
        assert not slug.endswith("-")


class TestWithSuffix:
    """Tests for with_suffix function."""

    def test_first_attempt_is_the_slug(self) -> None:
        assert with_suffix("post", 1) == "post"

    def test_later_attempts_are_numbered(self) -> None:
        assert with_suffix("post", 2) == "post-2"
        assert with_suffix("post", 10) == "post-10"
