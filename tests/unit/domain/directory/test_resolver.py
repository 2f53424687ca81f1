"""Unit tests for entity resolution (indices and state-name backfill)."""

import pytest

from listing_hub.domain.directory import Directory, build_index, resolve_entities
from listing_hub.domain.directory.models import City, State


def _directory(cities=(), states=(), categories=(), salons=()):
    return Directory.from_rows(salons, cities, states, categories)


@pytest.mark.unit
class TestBuildIndex:
    def test_last_duplicate_wins_but_keeps_first_position(self):
        states = [
            State(id="A", name="Alpha"),
            State(id="B", name="Beta"),
            State(id="A", name="Alpha Two"),
        ]

        index = build_index(states)

        assert list(index) == ["A", "B"]
        assert index["A"].name == "Alpha Two"

    def test_records_without_id_are_skipped(self):
        index = build_index([State(id=None, name="Nowhere"), State(id="X", name="X")])
        assert list(index) == ["X"]


@pytest.mark.unit
class TestResolveEntities:
    def test_backfills_state_name_onto_city(self):
        directory = _directory(
            cities=[{"id": "c1", "city": "Springfield", "state_id": "IL"}],
            states=[{"id": "IL", "state": "Illinois"}],
        )

        resolved = resolve_entities(directory)

        assert resolved.cities[0].state_name == "Illinois"
        assert resolved.city_index["c1"].state_name == "Illinois"

    def test_unknown_state_id_leaves_city_unchanged(self):
        directory = _directory(
            cities=[{"id": "c1", "city": "Springfield", "state_id": "ZZ"}],
            states=[{"id": "IL", "state": "Illinois"}],
        )

        resolved = resolve_entities(directory)

        assert resolved.cities[0].state_name is None

    def test_does_not_mutate_input(self):
        directory = _directory(
            cities=[{"id": "c1", "city": "Springfield", "state_id": "IL"}],
            states=[{"id": "IL", "state": "Illinois"}],
        )

        resolve_entities(directory)

        assert directory.cities[0].state_name is None
        assert dict(directory.city_index) == {}

    def test_is_idempotent(self):
        directory = _directory(
            cities=[{"id": "c1", "city": "Springfield", "state_id": "IL"}],
            states=[{"id": "IL", "state": "Illinois"}],
            categories=[{"id": "k", "category": "Spa"}],
        )

        once = resolve_entities(directory)
        twice = resolve_entities(once)

        assert twice == once

    def test_csv_name_columns_map_to_name(self):
        directory = _directory(
            cities=[{"id": "c1", "city": "Springfield"}],
            states=[{"id": "IL", "state": "Illinois"}],
            categories=[{"id": "k", "category": "Spa"}],
        )

        assert directory.cities[0].name == "Springfield"
        assert directory.states[0].name == "Illinois"
        assert directory.categories[0].name == "Spa"

    def test_blank_cells_become_none(self):
        city = City.model_validate({"id": "c1", "city": "", "state_id": ""})
        assert city.name is None
        assert city.state_id is None
