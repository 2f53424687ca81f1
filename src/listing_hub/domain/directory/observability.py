"""
Linkage observability for the directory build.

Unresolved links are never errors; this module only counts them so a build
log shows how much of the data stayed unlinked.
"""

from dataclasses import dataclass
from typing import Any, Dict

from .constants import MULTI_VALUE_SEPARATOR
from .resolver import Directory


@dataclass
class LinkageStats:
    """
    Counts of links that resolved or silently stayed unset.

    Attributes:
        salons: Total salon rows
        salons_inferred: Salons that gained a city or state id from their address
        salons_without_city: Salons whose city_id is unset or unknown
        salons_without_state: Salons whose state_id is unset or unknown
        unknown_category_refs: Category ids listed on salons but absent from the table
        cities_without_state: Cities whose state_id is unset or unknown

    Examples:
        >>> stats = LinkageStats(salons=10, salons_without_city=2)
        >>> stats.city_link_rate
        0.8
    """

    salons: int = 0
    salons_inferred: int = 0
    salons_without_city: int = 0
    salons_without_state: int = 0
    unknown_category_refs: int = 0
    cities_without_state: int = 0

    @property
    def city_link_rate(self) -> float:
        """Share of salons linked to a known city (0.0-1.0)."""
        if self.salons == 0:
            return 0.0
        return (self.salons - self.salons_without_city) / self.salons

    @property
    def state_link_rate(self) -> float:
        """Share of salons linked to a known state (0.0-1.0)."""
        if self.salons == 0:
            return 0.0
        return (self.salons - self.salons_without_state) / self.salons

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON logging."""
        return {
            "salons": self.salons,
            "salons_inferred": self.salons_inferred,
            "salons_without_city": self.salons_without_city,
            "salons_without_state": self.salons_without_state,
            "unknown_category_refs": self.unknown_category_refs,
            "cities_without_state": self.cities_without_state,
            "city_link_rate": round(self.city_link_rate, 4),
            "state_link_rate": round(self.state_link_rate, 4),
        }


def collect_linkage_stats(before: Directory, after: Directory) -> LinkageStats:
    """
    Compare the directory before and after inference.

    Args:
        before: Resolved directory (prior to address inference)
        after: Directory after inference (and optionally aggregation)

    Returns:
        LinkageStats for the run
    """
    inferred = sum(
        1
        for old, new in zip(before.salons, after.salons)
        if (old.city_id, old.state_id) != (new.city_id, new.state_id)
    )

    unknown_refs = 0
    for salon in after.salons:
        if not salon.category_ids:
            continue
        for category_id in salon.category_ids.split(MULTI_VALUE_SEPARATOR):
            if category_id not in after.category_index:
                unknown_refs += 1

    return LinkageStats(
        salons=len(after.salons),
        salons_inferred=inferred,
        salons_without_city=sum(
            1 for s in after.salons if not s.city_id or s.city_id not in after.city_index
        ),
        salons_without_state=sum(
            1
            for s in after.salons
            if not s.state_id or s.state_id not in after.state_index
        ),
        unknown_category_refs=unknown_refs,
        cities_without_state=sum(
            1
            for c in after.cities
            if not c.state_id or c.state_id not in after.state_index
        ),
    )


__all__ = ["LinkageStats", "collect_linkage_stats"]
