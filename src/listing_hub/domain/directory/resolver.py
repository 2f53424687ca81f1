"""
Entity resolution for the directory graph.

Builds the id → entity indices for cities, states and categories and
backfills state names onto cities. Indices are explicit values carried by
``Directory``; nothing here keeps module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, TypeVar

import structlog

from .models import Category, City, DirectoryRecord, Salon, State

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=DirectoryRecord)


@dataclass(frozen=True)
class Directory:
    """
    The four entity tables plus their id indices at one stage of the build.

    Each stage returns a new ``Directory``; the record tuples and the index
    mappings of the input are never modified.

    Attributes:
        salons: Salon records in file order
        cities: City records in file order
        states: State records in file order
        categories: Category records in file order
        city_index: id → City (last write wins, first-insertion key order)
        state_index: id → State
        category_index: id → Category
    """

    salons: Tuple[Salon, ...] = ()
    cities: Tuple[City, ...] = ()
    states: Tuple[State, ...] = ()
    categories: Tuple[Category, ...] = ()
    city_index: Mapping[str, City] = field(default_factory=dict)
    state_index: Mapping[str, State] = field(default_factory=dict)
    category_index: Mapping[str, Category] = field(default_factory=dict)

    @classmethod
    def from_rows(
        cls,
        salon_rows: Iterable[Mapping[str, Any]],
        city_rows: Iterable[Mapping[str, Any]],
        state_rows: Iterable[Mapping[str, Any]],
        category_rows: Iterable[Mapping[str, Any]],
    ) -> "Directory":
        """Parse raw CSV row mappings into records; indices are left empty."""
        return cls(
            salons=tuple(Salon.model_validate(dict(r)) for r in salon_rows),
            cities=tuple(City.model_validate(dict(r)) for r in city_rows),
            states=tuple(State.model_validate(dict(r)) for r in state_rows),
            categories=tuple(Category.model_validate(dict(r)) for r in category_rows),
        )

    def with_cities(self, cities: Sequence[City]) -> "Directory":
        """Replace the city table and rebuild its index."""
        cities = tuple(cities)
        return replace(self, cities=cities, city_index=build_index(cities))

    def with_states(self, states: Sequence[State]) -> "Directory":
        """Replace the state table and rebuild its index."""
        states = tuple(states)
        return replace(self, states=states, state_index=build_index(states))

    def with_categories(self, categories: Sequence[Category]) -> "Directory":
        """Replace the category table and rebuild its index."""
        categories = tuple(categories)
        return replace(
            self, categories=categories, category_index=build_index(categories)
        )

    def with_salons(self, salons: Sequence[Salon]) -> "Directory":
        """Replace the salon table."""
        return replace(self, salons=tuple(salons))


def build_index(records: Iterable[RecordT]) -> Dict[str, RecordT]:
    """
    Build an id → record mapping.

    Duplicate ids are not reported: the last record wins, while the key keeps
    the position of its first occurrence. Records without an id are left out
    since no foreign key can reference them.

    Args:
        records: Entity records in file order

    Returns:
        Insertion-ordered dictionary keyed by record id
    """
    index: Dict[str, RecordT] = {}
    for record in records:
        if record.id:
            index[record.id] = record
    return index


def backfill_state_names(
    cities: Iterable[City], state_index: Mapping[str, State]
) -> List[City]:
    """
    Copy the matching State's name onto each City.

    Cities whose ``state_id`` is absent or not in ``state_index`` are returned
    unchanged.

    Args:
        cities: City records
        state_index: id → State mapping

    Returns:
        New list of City records in the same order
    """
    resolved: List[City] = []
    for city in cities:
        state = state_index.get(city.state_id) if city.state_id else None
        if state is not None:
            city = city.model_copy(update={"state_name": state.name})
        resolved.append(city)
    return resolved


def resolve_entities(directory: Directory) -> Directory:
    """
    Build the three indices and backfill state names onto cities.

    Running this on an already resolved directory yields an equal directory.

    Args:
        directory: Directory freshly parsed from the archive

    Returns:
        Directory with populated indices and resolved city state names
    """
    resolved = directory.with_states(directory.states).with_categories(
        directory.categories
    )
    cities = backfill_state_names(directory.cities, resolved.state_index)
    resolved = resolved.with_cities(cities)

    logger.bind(stage="resolve").info(
        "directory.resolve.completed",
        cities=len(resolved.city_index),
        states=len(resolved.state_index),
        categories=len(resolved.category_index),
        cities_with_state=sum(1 for c in resolved.cities if c.state_name),
    )
    return resolved


__all__ = [
    "Directory",
    "backfill_state_names",
    "build_index",
    "resolve_entities",
]
