"""URL slug generation for blog titles."""

from re import sub
from unicodedata import normalize


def slugify(title: str) -> str:
    """
    Derive a URL-safe slug from a title.

    The result contains only lowercase ASCII letters, digits and single
    hyphens, with no leading or trailing hyphen. It may be empty when the
    title has no usable characters.

    Examples
    --------
    >>> slugify("Hello, World!")
    'hello-world'
    >>> slugify("  A -- B  ")
    'a-b'
    """
    ascii_title = normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    slug = ascii_title.lower()
    slug = sub(r"[^a-z0-9\s-]", "", slug)
    slug = sub(r"\s+", "-", slug)
    slug = sub(r"-{2,}", "-", slug)
    return slug.strip("-")


def with_suffix(slug: str, attempt: int) -> str:
    """Return the ``attempt``-th candidate for a taken slug (``slug-2``, ``slug-3``...)."""
    return slug if attempt <= 1 else f"{slug}-{attempt}"
