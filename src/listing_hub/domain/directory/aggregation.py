"""
Aggregate counts over the linked directory.

Counts use strict id equality only: a salon contributes to a city or state
count only through its ``city_id`` / ``state_id``. The projection stage uses
a wider membership rule (name fallback, city membership), so a view's
``salon_ids`` can be longer than the entity's ``salon_count`` here.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Mapping

import structlog

from .constants import MULTI_VALUE_SEPARATOR
from .models import Category, City, Salon, State
from .resolver import Directory

logger = structlog.get_logger(__name__)


def count_salons_per_city(
    salons: Iterable[Salon], city_index: Mapping[str, City]
) -> Counter:
    """Count salons whose ``city_id`` is a known city."""
    counts: Counter = Counter()
    for salon in salons:
        if salon.city_id and salon.city_id in city_index:
            counts[salon.city_id] += 1
    return counts


def count_salons_per_state(
    salons: Iterable[Salon], state_index: Mapping[str, State]
) -> Counter:
    """Count salons whose ``state_id`` is a known state."""
    counts: Counter = Counter()
    for salon in salons:
        if salon.state_id and salon.state_id in state_index:
            counts[salon.state_id] += 1
    return counts


def count_salons_per_category(
    salons: Iterable[Salon], category_index: Mapping[str, Category]
) -> Counter:
    """
    Count category references across salons.

    A category id repeated within one salon's field is counted each time.
    """
    counts: Counter = Counter()
    for salon in salons:
        if not salon.category_ids:
            continue
        for category_id in salon.category_ids.split(MULTI_VALUE_SEPARATOR):
            if category_id in category_index:
                counts[category_id] += 1
    return counts


def count_cities_per_state(
    cities: Iterable[City], state_index: Mapping[str, State]
) -> Counter:
    """Count city rows whose ``state_id`` is a known state."""
    counts: Counter = Counter()
    for city in cities:
        if city.state_id and city.state_id in state_index:
            counts[city.state_id] += 1
    return counts


def aggregate_counts(directory: Directory) -> Directory:
    """
    Attach derived counts to cities, states and categories.

    Counts are recomputed from scratch on every call, so aggregating an
    already aggregated directory gives the same numbers. Records sharing a
    duplicate id all receive that id's count.

    Args:
        directory: Output of ``infer_links``

    Returns:
        Directory with ``salon_count`` / ``city_count`` populated
    """
    city_salons = count_salons_per_city(directory.salons, directory.city_index)
    state_salons = count_salons_per_state(directory.salons, directory.state_index)
    category_salons = count_salons_per_category(
        directory.salons, directory.category_index
    )
    state_cities = count_cities_per_state(directory.cities, directory.state_index)

    cities: List[City] = [
        c.model_copy(update={"salon_count": city_salons.get(c.id, 0)})
        for c in directory.cities
    ]
    states: List[State] = [
        s.model_copy(
            update={
                "salon_count": state_salons.get(s.id, 0),
                "city_count": state_cities.get(s.id, 0),
            }
        )
        for s in directory.states
    ]
    categories: List[Category] = [
        c.model_copy(update={"salon_count": category_salons.get(c.id, 0)})
        for c in directory.categories
    ]

    aggregated = (
        directory.with_cities(cities).with_states(states).with_categories(categories)
    )

    logger.bind(stage="aggregate").info(
        "directory.aggregate.completed",
        salons_with_city=sum(city_salons.values()),
        salons_with_state=sum(state_salons.values()),
        category_links=sum(category_salons.values()),
        cities_with_state=sum(state_cities.values()),
    )
    return aggregated


__all__ = [
    "aggregate_counts",
    "count_cities_per_state",
    "count_salons_per_category",
    "count_salons_per_city",
    "count_salons_per_state",
]
