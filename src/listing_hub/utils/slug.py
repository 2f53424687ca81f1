"""
URL slug generation.

Slugs are lowercase ASCII tokens joined by single hyphens. Non-ASCII letters
are transliterated (``Łódź`` becomes ``lodz``), ``&`` becomes ``and`` and
every other run of non-alphanumeric characters collapses to one hyphen.

Slugs are not deduplicated: two listings with the same city, state, title
and id produce the same slug and the later page overwrites the earlier one.
"""

from typing import Optional

from slugify import slugify as _slugify

_REPLACEMENTS = [["&", " and "]]


def slugify(text: Optional[str]) -> str:
    """
    Convert text into a URL-safe lowercase token.

    Args:
        text: Arbitrary text; ``None`` is treated as empty

    Returns:
        Slug string, possibly empty

    Examples:
        >>> slugify("Springfield, Illinois")
        'springfield-illinois'
        >>> slugify("Café & Spa")
        'cafe-and-spa'
    """
    if not text:
        return ""
    return _slugify(str(text), lowercase=True, replacements=_REPLACEMENTS)
