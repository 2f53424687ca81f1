"""
Projection of the linked directory into page/view models.

Stages run in order because later ones read earlier output:

1. salons     - slugs and split multi-value fields
2. cities     - salon membership by city id OR case-insensitive city name
3. states     - member cities, then salons by state id, state name, or city
4. categories - salons listing the category id

Membership lists keep salon file order and contain each salon once. The
projection never modifies the directory it reads.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set

import structlog

from listing_hub.utils.slug import slugify

from .constants import (
    MULTI_VALUE_FIELDS,
    MULTI_VALUE_SEPARATOR,
    UNKNOWN_CITY_SLUG,
    UNKNOWN_STATE_SLUG,
)
from .models import (
    Category,
    CategoryView,
    City,
    CityView,
    Salon,
    SalonView,
    State,
    StateView,
)
from .resolver import Directory

logger = structlog.get_logger(__name__)


@dataclass
class ProjectedDirectory:
    """
    View models for every entity, in source order.

    City and state views record member positions into ``salons`` and
    ``cities``, so records sharing a duplicate id stay distinct.
    """

    salons: List[SalonView] = field(default_factory=list)
    cities: List[CityView] = field(default_factory=list)
    states: List[StateView] = field(default_factory=list)
    categories: List[CategoryView] = field(default_factory=list)

    def salons_at(self, positions: Iterable[int]) -> List[SalonView]:
        """Salon views at the given positions."""
        return [self.salons[pos] for pos in positions]

    def cities_at(self, positions: Iterable[int]) -> List[CityView]:
        """City views at the given positions."""
        return [self.cities[pos] for pos in positions]


def split_multi_value(value: Optional[str]) -> List[str]:
    """
    Split a comma-separated field.

    Examples:
        >>> split_multi_value("")
        []
        >>> split_multi_value("a,b,c")
        ['a', 'b', 'c']
    """
    if not value:
        return []
    return value.split(MULTI_VALUE_SEPARATOR)


def salon_slug(salon: Salon) -> str:
    """Build ``<city>-<state>-<title>-<id>`` with unknown-city/state fallbacks."""
    city_slug = slugify(salon.city_name) if salon.city_name else UNKNOWN_CITY_SLUG
    state_slug = slugify(salon.state_name) if salon.state_name else UNKNOWN_STATE_SLUG
    return slugify(f"{city_slug}-{state_slug}-{salon.title or ''}-{salon.id or ''}")


def project_salon(salon: Salon) -> SalonView:
    """Project one salon record into its view model."""
    data = salon.model_dump()
    for name in MULTI_VALUE_FIELDS:
        data[name] = split_multi_value(data.get(name))
    return SalonView(slug=salon_slug(salon), **data)


def _positions_by(
    salons: Sequence[SalonView], key: str, *, casefold: bool = False
) -> Dict[str, List[int]]:
    """Group salon positions by a string attribute (skipping unset values)."""
    groups: Dict[str, List[int]] = defaultdict(list)
    for pos, salon in enumerate(salons):
        value = getattr(salon, key)
        if value:
            groups[value.lower() if casefold else value].append(pos)
    return groups


def _with_ids(salons: Sequence[SalonView], positions: Iterable[int]) -> List[int]:
    """Positions of salons that carry an id, in file order."""
    return [pos for pos in sorted(positions) if salons[pos].id is not None]


def _ids_at(salons: Sequence[SalonView], positions: Iterable[int]) -> List[str]:
    """Return salon ids for a set of positions, in file order."""
    return [salons[pos].id for pos in _with_ids(salons, positions)]


def project_cities(cities: Iterable[City], salons: Sequence[SalonView]) -> List[CityView]:
    """
    Project cities with their salon membership.

    A salon belongs to a city when its ``city_id`` equals the city id or its
    ``city_name`` matches the city name case-insensitively.
    """
    by_city_id = _positions_by(salons, "city_id")
    by_city_name = _positions_by(salons, "city_name", casefold=True)

    views: List[CityView] = []
    for city in cities:
        members: Set[int] = set(by_city_id.get(city.id or "", []))
        if city.name:
            members.update(by_city_name.get(city.name.lower(), []))
        positions = _with_ids(salons, members)
        salon_ids = [salons[pos].id for pos in positions]
        view = CityView(
            id=city.id,
            name=city.name,
            slug=slugify(f"{city.name or ''}-{city.state_id or ''}"),
            state_id=city.state_id,
            state_name=city.state_name,
            salon_ids=salon_ids,
            salon_count=len(salon_ids),
        )
        view._salon_positions = positions
        views.append(view)
    return views


def project_states(
    states: Iterable[State],
    cities: Sequence[CityView],
    salons: Sequence[SalonView],
) -> List[StateView]:
    """
    Project states with member cities and salons.

    A salon belongs to a state when its ``state_id`` equals the state id, its
    ``state_name`` matches case-insensitively, or its ``city_id`` is one of
    the state's cities.
    """
    by_state_id = _positions_by(salons, "state_id")
    by_state_name = _positions_by(salons, "state_name", casefold=True)
    by_city_id = _positions_by(salons, "city_id")

    cities_by_state: Dict[str, List[int]] = defaultdict(list)
    for pos, city in enumerate(cities):
        if city.state_id and city.id is not None:
            cities_by_state[city.state_id].append(pos)

    views: List[StateView] = []
    for state in states:
        city_positions = list(cities_by_state.get(state.id or "", []))
        city_ids = [cities[pos].id for pos in city_positions]

        members: Set[int] = set(by_state_id.get(state.id or "", []))
        if state.name:
            members.update(by_state_name.get(state.name.lower(), []))
        for city_id in city_ids:
            members.update(by_city_id.get(city_id, []))
        salon_positions = _with_ids(salons, members)
        salon_ids = [salons[pos].id for pos in salon_positions]

        view = StateView(
            id=state.id,
            name=state.name,
            slug=slugify(state.name),
            city_ids=city_ids,
            salon_ids=salon_ids,
            city_count=len(city_ids),
            salon_count=len(salon_ids),
        )
        view._city_positions = city_positions
        view._salon_positions = salon_positions
        views.append(view)
    return views


def project_categories(
    categories: Iterable[Category], salons: Sequence[SalonView]
) -> List[CategoryView]:
    """Project categories with the salons that list their id."""
    by_category: Dict[str, Set[int]] = defaultdict(set)
    for pos, salon in enumerate(salons):
        for category_id in salon.category_ids:
            by_category[category_id].add(pos)

    views: List[CategoryView] = []
    for category in categories:
        salon_ids = _ids_at(salons, by_category.get(category.id or "", set()))
        views.append(
            CategoryView(
                id=category.id,
                name=category.name,
                slug=slugify(category.name),
                salon_ids=salon_ids,
                salon_count=len(salon_ids),
            )
        )
    return views


def project_directory(directory: Directory) -> ProjectedDirectory:
    """
    Build all view models from an aggregated directory.

    Args:
        directory: Output of ``aggregate_counts``

    Returns:
        ProjectedDirectory holding salon, city, state and category views
    """
    salons = [project_salon(s) for s in directory.salons]
    cities = project_cities(directory.cities, salons)
    states = project_states(directory.states, cities, salons)
    categories = project_categories(directory.categories, salons)

    logger.bind(stage="project").info(
        "directory.project.completed",
        salons=len(salons),
        cities=len(cities),
        states=len(states),
        categories=len(categories),
    )
    return ProjectedDirectory(
        salons=salons, cities=cities, states=states, categories=categories
    )


__all__ = [
    "ProjectedDirectory",
    "project_categories",
    "project_cities",
    "project_directory",
    "project_salon",
    "project_states",
    "salon_slug",
    "split_multi_value",
]
