"""Unit tests for slugify."""

import pytest

from listing_hub.utils.slug import slugify


@pytest.mark.unit
@pytest.mark.parametrize(
    "text,expected",
    [
        ("Springfield", "springfield"),
        ("St. Louis-MO", "st-louis-mo"),
        ("Café & Spa", "cafe-and-spa"),
        ("  --Hair   Free!!  ", "hair-free"),
        ("Coeur d'Alene", "coeur-d-alene"),
        ("Łódź", "lodz"),
        ("São Paulo", "sao-paulo"),
        ("", ""),
        (None, ""),
    ],
)
def test_slugify(text, expected):
    assert slugify(text) == expected


@pytest.mark.unit
def test_slug_has_no_repeated_or_edge_hyphens():
    slug = slugify("a -- b // c")
    assert slug == "a-b-c"
