"""
Site build orchestration.

Runs the full batch job with strict phase barriers:

    load -> resolve -> infer -> aggregate -> project -> data dumps -> pages -> sitemaps

Any failure aborts the build. Archive problems surface as
``ArchiveReadError``; every other exception is wrapped in
``DirectoryBuildError`` carrying the name of the phase that failed.
"""

from __future__ import annotations

import time
from collections import defaultdict
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

import structlog

from listing_hub.config import Settings, SiteConfig
from listing_hub.domain.directory import (
    CityView,
    ProjectedDirectory,
    load_directory,
    process_directory,
)
from listing_hub.domain.pipelines import BuildResult, DirectoryBuildError, ErrorContext
from listing_hub.io.readers import ArchiveReader, ArchiveReadError
from listing_hub.io.writers import SiteWriter

from .renderer import PageRenderer
from .sitemaps import SitemapBuilder

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _run_stage(stage: str, operation: str, func: Callable[..., T], *args: Any) -> T:
    """Run one build stage, logging structured context on failure."""
    try:
        return func(*args)
    except ArchiveReadError as exc:
        error_ctx = ErrorContext(
            error_type="archive",
            operation=operation,
            stage=stage,
            error_message=str(exc),
            member=exc.member,
        )
        logger.error("site.build.failed", **error_ctx.to_log_dict())
        raise
    except DirectoryBuildError as exc:
        error_ctx = ErrorContext(
            error_type="phase",
            operation=operation,
            stage=exc.stage or stage,
            error_message=str(exc),
            details={"exception": type(exc.original_error).__name__},
        )
        logger.error("site.build.failed", **error_ctx.to_log_dict())
        raise
    except Exception as exc:
        error_ctx = ErrorContext(
            error_type="unexpected",
            operation=operation,
            stage=stage,
            error_message=str(exc),
            details={"exception": type(exc).__name__},
        )
        logger.error("site.build.failed", **error_ctx.to_log_dict())
        raise DirectoryBuildError(
            f"{operation} failed: {exc}", stage=stage, original_error=exc
        ) from exc


def write_data_files(writer: SiteWriter, projected: ProjectedDirectory) -> List[str]:
    """Write the four JSON data dumps; returns their relative paths."""
    dumps = {
        "data/salons.json": projected.salons,
        "data/cities.json": projected.cities,
        "data/states.json": projected.states,
        "data/categories.json": projected.categories,
    }
    for path, views in dumps.items():
        writer.write_json(path, [v.model_dump(mode="json") for v in views])
    logger.info("site.data.written", files=list(dumps))
    return list(dumps)


def write_pages(
    writer: SiteWriter,
    renderer: PageRenderer,
    projected: ProjectedDirectory,
    progress_interval: int = 100,
) -> Dict[str, int]:
    """
    Render and write company, city and state pages.

    Returns:
        Pages written per section
    """
    cities_by_state: Dict[Optional[str], List[CityView]] = defaultdict(list)
    for city in projected.cities:
        cities_by_state[city.state_id].append(city)

    written: Dict[str, int] = {"companies": 0, "cities": 0, "states": 0}

    for salon in projected.salons:
        writer.write_page("companies", salon.slug, renderer.render_company(salon))
        written["companies"] += 1
        if written["companies"] % progress_interval == 0:
            logger.info("site.pages.progress", section="companies", pages=written["companies"])
    logger.info("site.pages.written", section="companies", pages=written["companies"])

    for city in projected.cities:
        city_salons = projected.salons_at(city.salon_positions)
        html = renderer.render_city(city, city_salons, cities_by_state[city.state_id])
        writer.write_page("cities", city.slug, html)
        written["cities"] += 1
        if written["cities"] % progress_interval == 0:
            logger.info("site.pages.progress", section="cities", pages=written["cities"])
    logger.info("site.pages.written", section="cities", pages=written["cities"])

    for state in projected.states:
        state_cities = projected.cities_at(state.city_positions)
        state_salons = projected.salons_at(state.salon_positions)
        writer.write_page(
            "states", state.slug, renderer.render_state(state, state_cities, state_salons)
        )
        written["states"] += 1
    logger.info("site.pages.written", section="states", pages=written["states"])

    return written


def write_sitemaps(
    writer: SiteWriter,
    renderer: PageRenderer,
    sitemaps: SitemapBuilder,
    projected: ProjectedDirectory,
) -> List[str]:
    """Write XML sitemaps and the HTML sitemap page; returns XML paths."""
    files = sitemaps.build(projected.salons, projected.cities, projected.states)
    for path, content in files.items():
        writer.write_text(path, content)
    writer.write_text(
        "sitemap/index.html",
        renderer.render_sitemap_page(projected.states, projected.cities),
    )
    logger.info("site.sitemaps.written", files=len(files))
    return list(files)


def build_site(
    archive_path: Union[str, Path],
    output_dir: Union[str, Path],
    site: SiteConfig,
    settings: Optional[Settings] = None,
) -> BuildResult:
    """
    Generate the complete static site from a CSV archive.

    Args:
        archive_path: Zip archive with the four CSV members
        output_dir: Output root
        site: Site metadata
        settings: Optional settings for limits and chunk sizes (defaults apply)

    Returns:
        BuildResult describing what was written

    Raises:
        ArchiveReadError: Archive unreadable or a member missing
        DirectoryBuildError: Any other failure, tagged with the stage
    """
    settings = settings or Settings()
    start_time = time.perf_counter()
    log = logger.bind(archive=str(archive_path), output_dir=str(output_dir))
    log.info("site.build.start")

    reader = ArchiveReader(str(archive_path))
    directory = _run_stage("load", "read_members", load_directory, reader)
    processing = _run_stage("process", "process_directory", process_directory, directory)
    projected = processing.projected

    writer = SiteWriter(output_dir)
    renderer = PageRenderer(
        site,
        featured_limit=settings.featured_limit,
        nearby_city_limit=settings.nearby_city_limit,
        sitemap_city_limit=settings.sitemap_city_limit,
    )
    sitemaps = SitemapBuilder(site, chunk_size=settings.sitemap_chunk_size)

    _run_stage("render", "prepare_output", writer.prepare)
    _run_stage("render", "write_data_files", write_data_files, writer, projected)
    pages = _run_stage(
        "render",
        "write_pages",
        write_pages,
        writer,
        renderer,
        projected,
        settings.progress_interval,
    )
    sitemap_files = _run_stage(
        "sitemaps", "write_sitemaps", write_sitemaps, writer, renderer, sitemaps, projected
    )

    duration_ms = (time.perf_counter() - start_time) * 1000
    result = BuildResult(
        success=True,
        output_dir=Path(output_dir),
        salons=len(projected.salons),
        cities=len(projected.cities),
        states=len(projected.states),
        categories=len(projected.categories),
        # +1 for the HTML sitemap page
        pages_written=sum(pages.values()) + 1,
        sitemap_files=sitemap_files,
        duration_ms=duration_ms,
        metrics={
            "pages": pages,
            "linkage": processing.linkage.to_dict(),
            "processing_ms": round(processing.duration_ms, 2),
            "files_written": writer.files_written,
        },
    )
    log.info("site.build.completed", **result.as_dict())
    return result


__all__ = ["build_site", "write_data_files", "write_pages", "write_sitemaps"]
