"""
Link inference for salons that carry an address but no city/state ids.

An address such as ``"123 Main St, Springfield, Illinois, USA"`` is split on
commas; the third-from-last segment is taken as the city name and the
second-from-last as the state name. Each candidate is matched
case-insensitively against the corresponding name index. The two lookups are
independent, and a failed lookup leaves the salon's fields unset.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Protocol, Tuple

import structlog

from .constants import (
    ADDRESS_CITY_OFFSET,
    ADDRESS_MIN_SEGMENTS,
    ADDRESS_SEPARATOR,
    ADDRESS_STATE_OFFSET,
)
from .models import Salon
from .resolver import Directory

logger = structlog.get_logger(__name__)


class NamedEntity(Protocol):
    """Anything with an id and a display name (City, State)."""

    id: Optional[str]
    name: Optional[str]


def build_name_index(index: Mapping[str, NamedEntity]) -> Dict[str, str]:
    """
    Build a case-insensitive name → id lookup from an id index.

    Iterates ``index`` in insertion order and keeps the first id seen for each
    lowercased name, which matches a linear first-match scan over the index.

    Args:
        index: id → entity mapping

    Returns:
        Dictionary of lowercased name to entity id
    """
    names: Dict[str, str] = {}
    for entity_id, entity in index.items():
        if entity.name:
            names.setdefault(entity.name.lower(), entity_id)
    return names


def split_address(address: Optional[str]) -> List[str]:
    """Split an address on commas and trim each segment."""
    if not address:
        return []
    return [part.strip() for part in address.split(ADDRESS_SEPARATOR)]


def address_candidates(address: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Extract (city, state) name candidates from an address.

    Returns:
        Tuple of candidate names, or None when the address has fewer than
        three comma-separated segments
    """
    parts = split_address(address)
    if len(parts) < ADDRESS_MIN_SEGMENTS:
        return None
    return parts[ADDRESS_CITY_OFFSET], parts[ADDRESS_STATE_OFFSET]


def needs_inference(salon: Salon) -> bool:
    """A salon is inferred only when it has an address and neither id."""
    return bool(salon.address) and not salon.city_id and not salon.state_id


def infer_salon_links(
    salon: Salon,
    directory: Directory,
    city_names: Mapping[str, str],
    state_names: Mapping[str, str],
) -> Salon:
    """
    Fill city/state ids and names for one salon from its address.

    Args:
        salon: Salon record
        directory: Resolved directory providing the id indices
        city_names: Lowercased city name → city id
        state_names: Lowercased state name → state id

    Returns:
        The same salon when nothing was inferred, otherwise an updated copy
    """
    if not needs_inference(salon):
        return salon

    candidates = address_candidates(salon.address)
    if candidates is None:
        return salon
    city_candidate, state_candidate = candidates

    update: Dict[str, Optional[str]] = {}

    city_id = city_names.get(city_candidate.lower())
    if city_id is not None:
        update["city_id"] = city_id
        update["city_name"] = directory.city_index[city_id].name

    state_id = state_names.get(state_candidate.lower())
    if state_id is not None:
        update["state_id"] = state_id
        update["state_name"] = directory.state_index[state_id].name

    if not update:
        return salon
    return salon.model_copy(update=update)


def infer_links(directory: Directory) -> Directory:
    """
    Run address inference over every salon.

    Args:
        directory: Output of ``resolve_entities``

    Returns:
        Directory whose salons carry inferred city/state links
    """
    city_names = build_name_index(directory.city_index)
    state_names = build_name_index(directory.state_index)

    salons: List[Salon] = []
    attempted = 0
    inferred = 0
    for salon in directory.salons:
        if needs_inference(salon):
            attempted += 1
        linked = infer_salon_links(salon, directory, city_names, state_names)
        if linked is not salon:
            inferred += 1
        salons.append(linked)

    logger.bind(stage="infer").info(
        "directory.infer.completed",
        salons=len(salons),
        attempted=attempted,
        inferred=inferred,
    )
    return directory.with_salons(salons)


__all__ = [
    "address_candidates",
    "build_name_index",
    "infer_links",
    "infer_salon_links",
    "needs_inference",
    "split_address",
]
