"""Pytest configuration and shared archive fixtures.

Archives are built in ``tmp_path`` from plain row dictionaries so each test
states exactly the CSV content it depends on.
"""

from __future__ import annotations

import csv
import io
import zipfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from listing_hub.config.settings import get_settings

SALON_HEADER = [
    "id",
    "title",
    "address",
    "city_id",
    "city_name",
    "state_id",
    "state_name",
    "telephone",
    "description",
    "latitude",
    "longitude",
    "category_ids",
    "images",
]
CITY_HEADER = ["id", "city", "state_id"]
STATE_HEADER = ["id", "state"]
CATEGORY_HEADER = ["id", "category"]

Rows = Sequence[Dict[str, str]]


def _csv_text(header: Sequence[str], rows: Rows) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(header), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow({k: row.get(k, "") for k in header})
    return buffer.getvalue()


def write_archive(
    path: Path,
    salons: Rows = (),
    cities: Rows = (),
    states: Rows = (),
    categories: Rows = (),
    omit: Optional[List[str]] = None,
) -> Path:
    """Write a zip archive with the four CSV members (minus ``omit``)."""
    members = {
        "beauty_salon.csv": _csv_text(SALON_HEADER, salons),
        "city.csv": _csv_text(CITY_HEADER, cities),
        "state.csv": _csv_text(STATE_HEADER, states),
        "category.csv": _csv_text(CATEGORY_HEADER, categories),
    }
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in members.items():
            if omit and name in omit:
                continue
            zf.writestr(name, content)
    return path


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: ``make_archive(salons=[...], cities=[...], ...)``."""

    def _make(name: str = "data.zip", **tables) -> Path:
        return write_archive(tmp_path / name, **tables)

    return _make


@pytest.fixture
def springfield_tables() -> Dict[str, List[Dict[str, str]]]:
    """One state, one city, one category and two salons.

    Salon ``s1`` carries explicit ids; salon ``s2`` only has an address that
    names the city and state.
    """
    return {
        "states": [{"id": "IL", "state": "Illinois"}],
        "cities": [{"id": "c1", "city": "Springfield", "state_id": "IL"}],
        "categories": [{"id": "cat1", "category": "Electrolysis"}],
        "salons": [
            {
                "id": "s1",
                "title": "Smooth Skin Studio",
                "address": "1 Oak Ave",
                "city_id": "c1",
                "city_name": "Springfield",
                "state_id": "IL",
                "state_name": "Illinois",
                "latitude": "39.78",
                "longitude": "-89.65",
                "category_ids": "cat1",
            },
            {
                "id": "s2",
                "title": "Hair Free Clinic",
                "address": "123 Main St, Springfield, Illinois, USA",
                "category_ids": "cat1,cat9",
            },
        ],
    }


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
