"""Directory domain - Business Service Layer.

Main entry point for turning the archive tables into a linked, projected
directory. Stages run strictly in order:

    load -> resolve -> infer -> aggregate -> project
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Protocol, TypeVar

import structlog

from listing_hub.domain.pipelines import DirectoryBuildError

from .aggregation import aggregate_counts
from .constants import CATEGORY_MEMBER, CITY_MEMBER, SALON_MEMBER, STATE_MEMBER
from .inference import infer_links
from .observability import LinkageStats, collect_linkage_stats
from .projection import ProjectedDirectory, project_directory
from .resolver import Directory, resolve_entities

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class RowSource(Protocol):
    """Anything that can produce flat row mappings for an archive member."""

    def read_rows(self, member: str) -> List[Dict[str, Any]]: ...


@dataclass
class DirectoryProcessingResult:
    """
    Output of ``process_directory``.

    Attributes:
        directory: Resolved, inferred and aggregated entity tables
        projected: View models for rendering and data dumps
        linkage: Counts of resolved and unresolved links
        duration_ms: Processing time (excluding loading) in milliseconds
    """

    directory: Directory
    projected: ProjectedDirectory
    linkage: LinkageStats
    duration_ms: float


def _run_phase(stage: str, func: Callable[..., T], *args: Any) -> T:
    """Run one processing phase, tagging unexpected failures with its name."""
    try:
        return func(*args)
    except DirectoryBuildError:
        raise
    except Exception as exc:
        raise DirectoryBuildError(
            f"{stage} phase failed: {exc}", stage=stage, original_error=exc
        ) from exc


def load_directory(source: RowSource) -> Directory:
    """
    Read the four CSV members and parse them into entity records.

    Args:
        source: Row source, normally an ``ArchiveReader``

    Returns:
        Directory with raw records and empty indices

    Raises:
        ArchiveReadError: Propagated from the source when a member is missing
    """
    salon_rows = source.read_rows(SALON_MEMBER)
    city_rows = source.read_rows(CITY_MEMBER)
    state_rows = source.read_rows(STATE_MEMBER)
    category_rows = source.read_rows(CATEGORY_MEMBER)

    directory = Directory.from_rows(salon_rows, city_rows, state_rows, category_rows)

    logger.bind(stage="load").info(
        "directory.load.completed",
        salons=len(directory.salons),
        cities=len(directory.cities),
        states=len(directory.states),
        categories=len(directory.categories),
    )
    return directory


def process_directory(directory: Directory) -> DirectoryProcessingResult:
    """
    Resolve, infer, aggregate and project a freshly loaded directory.

    Unmatched foreign keys and names are skipped silently; the linkage
    summary is logged for information only.

    Args:
        directory: Output of ``load_directory``

    Returns:
        DirectoryProcessingResult with the aggregated directory and views

    Raises:
        DirectoryBuildError: A phase failed; ``stage`` names the phase
    """
    start_time = time.perf_counter()

    resolved = _run_phase("resolve", resolve_entities, directory)
    linked = _run_phase("infer", infer_links, resolved)
    aggregated = _run_phase("aggregate", aggregate_counts, linked)

    linkage = _run_phase("aggregate", collect_linkage_stats, resolved, aggregated)
    logger.bind(stage="aggregate").info("directory.linkage.summary", **linkage.to_dict())

    projected = _run_phase("project", project_directory, aggregated)

    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.bind(stage="project").info(
        "directory.process.completed", duration_ms=round(duration_ms, 2)
    )

    return DirectoryProcessingResult(
        directory=aggregated,
        projected=projected,
        linkage=linkage,
        duration_ms=duration_ms,
    )


__all__ = [
    "DirectoryProcessingResult",
    "RowSource",
    "load_directory",
    "process_directory",
]
