"""Directory domain - Constants.

Archive member names, slug fallbacks and field groupings shared by the
resolver, inference, aggregation and projection stages.
"""

from __future__ import annotations

from typing import Sequence

# Archive members
SALON_MEMBER: str = "beauty_salon.csv"
CITY_MEMBER: str = "city.csv"
STATE_MEMBER: str = "state.csv"
CATEGORY_MEMBER: str = "category.csv"

REQUIRED_MEMBERS: Sequence[str] = (
    SALON_MEMBER,
    CITY_MEMBER,
    STATE_MEMBER,
    CATEGORY_MEMBER,
)

# Slug tokens used when a salon has no resolved city/state name
UNKNOWN_CITY_SLUG: str = "unknown-city"
UNKNOWN_STATE_SLUG: str = "unknown-state"

# Comma-separated salon columns projected into lists
MULTI_VALUE_SEPARATOR: str = ","
MULTI_VALUE_FIELDS: Sequence[str] = (
    "category_ids",
    "detail_keys",
    "detail_values",
    "amenity_ids",
    "payment_ids",
    "images",
)

# Address inference: "<street>, <city>, <state>, <country>"
ADDRESS_SEPARATOR: str = ","
ADDRESS_MIN_SEGMENTS: int = 3
ADDRESS_CITY_OFFSET: int = -3
ADDRESS_STATE_OFFSET: int = -2

__all__ = [
    "ADDRESS_CITY_OFFSET",
    "ADDRESS_MIN_SEGMENTS",
    "ADDRESS_SEPARATOR",
    "ADDRESS_STATE_OFFSET",
    "CATEGORY_MEMBER",
    "CITY_MEMBER",
    "MULTI_VALUE_FIELDS",
    "MULTI_VALUE_SEPARATOR",
    "REQUIRED_MEMBERS",
    "SALON_MEMBER",
    "STATE_MEMBER",
    "UNKNOWN_CITY_SLUG",
    "UNKNOWN_STATE_SLUG",
]
