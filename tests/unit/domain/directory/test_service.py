"""Unit tests for the directory service and linkage stats."""

import pytest

from listing_hub.domain.directory import (
    Directory,
    LinkageStats,
    load_directory,
    process_directory,
)
from listing_hub.domain.pipelines import DirectoryBuildError
from listing_hub.io.readers import ArchiveReadError


class FakeRowSource:
    """In-memory row source keyed by member name."""

    def __init__(self, tables):
        self.tables = tables
        self.requested = []

    def read_rows(self, member):
        self.requested.append(member)
        if member not in self.tables:
            raise ArchiveReadError(f"CSV file {member} not found", member=member)
        return self.tables[member]


@pytest.mark.unit
class TestLoadDirectory:
    def test_reads_all_four_members(self):
        source = FakeRowSource(
            {
                "beauty_salon.csv": [{"id": "s1", "title": "A"}],
                "city.csv": [{"id": "c1", "city": "Springfield"}],
                "state.csv": [{"id": "IL", "state": "Illinois"}],
                "category.csv": [],
            }
        )

        directory = load_directory(source)

        assert source.requested == [
            "beauty_salon.csv",
            "city.csv",
            "state.csv",
            "category.csv",
        ]
        assert directory.salons[0].title == "A"
        assert directory.cities[0].name == "Springfield"

    def test_missing_member_propagates(self):
        source = FakeRowSource({"beauty_salon.csv": []})

        with pytest.raises(ArchiveReadError) as exc_info:
            load_directory(source)

        assert exc_info.value.member == "city.csv"


@pytest.mark.unit
class TestProcessDirectory:
    def test_linkage_stats(self):
        directory = Directory.from_rows(
            [
                {"id": "s1", "address": "1 Main, Springfield, Illinois, USA"},
                {"id": "s2", "category_ids": "k1,missing"},
            ],
            [{"id": "c1", "city": "Springfield", "state_id": "IL"}],
            [{"id": "IL", "state": "Illinois"}],
            [{"id": "k1", "category": "Spa"}],
        )

        result = process_directory(directory)

        assert result.linkage.salons == 2
        assert result.linkage.salons_inferred == 1
        assert result.linkage.salons_without_city == 1
        assert result.linkage.unknown_category_refs == 1
        assert result.linkage.cities_without_state == 0
        assert result.linkage.city_link_rate == 0.5
        assert result.duration_ms >= 0

    def test_empty_directory(self):
        result = process_directory(Directory())

        assert result.projected.salons == []
        assert result.linkage.to_dict()["city_link_rate"] == 0.0


@pytest.mark.unit
def test_linkage_rates_handle_zero_salons():
    assert LinkageStats().state_link_rate == 0.0


@pytest.mark.unit
class TestSpringfieldFixture:
    def test_aggregated_counts_include_inferred_salon(self, springfield_tables):
        directory = Directory.from_rows(
            springfield_tables["salons"],
            springfield_tables["cities"],
            springfield_tables["states"],
            springfield_tables["categories"],
        )

        result = process_directory(directory)

        assert result.directory.cities[0].salon_count == 2
        assert result.directory.states[0].salon_count == 2
        assert result.projected.cities[0].salon_ids == ["s1", "s2"]
        assert result.projected.states[0].salon_ids == ["s1", "s2"]


@pytest.mark.unit
class TestPhaseFailures:
    @pytest.mark.parametrize(
        "target,stage",
        [
            ("resolve_entities", "resolve"),
            ("infer_links", "infer"),
            ("aggregate_counts", "aggregate"),
            ("project_directory", "project"),
        ],
    )
    def test_failure_is_tagged_with_phase(self, monkeypatch, target, stage):
        def _boom(*args, **kwargs):
            raise RuntimeError("phase exploded")

        monkeypatch.setattr(f"listing_hub.domain.directory.service.{target}", _boom)

        with pytest.raises(DirectoryBuildError) as exc_info:
            process_directory(Directory())

        assert exc_info.value.stage == stage
        assert isinstance(exc_info.value.original_error, RuntimeError)
