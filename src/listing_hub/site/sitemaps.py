"""
XML sitemap generation.

Produces chunked company sitemaps (``companies-sitemap<N>.xml``), one sitemap
each for cities and states, and the ``sitemap.xml`` index that references
them all. Functions return file contents keyed by path relative to the
output root so that callers decide where and how to write them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, TypeVar

from jinja2 import Environment

from listing_hub.config import SiteConfig
from listing_hub.domain.directory.models import CityView, SalonView, StateView

from .renderer import create_environment

T = TypeVar("T")

SITEMAPS_DIR = "sitemaps"
SITEMAP_INDEX = "sitemap.xml"
CITIES_SITEMAP = "cities-sitemap.xml"
STATES_SITEMAP = "states-sitemap.xml"


@dataclass(frozen=True)
class SitemapUrl:
    """One <url> entry of a urlset."""

    loc: str
    changefreq: str
    priority: str


@dataclass(frozen=True)
class SitemapEntry:
    """One <sitemap> entry of a sitemap index."""

    loc: str
    lastmod: str


def chunk(items: Sequence[T], size: int) -> List[Sequence[T]]:
    """
    Split items into consecutive chunks of at most ``size``.

    Examples:
        >>> [len(c) for c in chunk(list(range(450)), 200)]
        [200, 200, 50]
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [items[i : i + size] for i in range(0, len(items), size)]


def isoformat_now() -> str:
    """UTC timestamp in ISO-8601 with millisecond precision and a Z suffix."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class SitemapBuilder:
    """
    Render sitemap XML documents for a projected directory.

    Args:
        site: Site metadata (``base_url`` prefixes every <loc>)
        chunk_size: Company URLs per sitemap file
        environment: Optional pre-built Jinja2 environment
    """

    def __init__(
        self,
        site: SiteConfig,
        chunk_size: int = 200,
        environment: Optional[Environment] = None,
    ):
        self.site = site
        self.chunk_size = chunk_size
        self.env = environment or create_environment()

    def _urlset(self, urls: Sequence[SitemapUrl]) -> str:
        return self.env.get_template("urlset.xml").render(urls=urls)

    def _url(self, path: str) -> str:
        return f"{self.site.base_url}{path}"

    def company_sitemaps(self, salons: Sequence[SalonView]) -> Dict[str, str]:
        """Render ``companies-sitemap<N>.xml`` files, N starting at 1."""
        files: Dict[str, str] = {}
        for number, group in enumerate(chunk(salons, self.chunk_size), start=1):
            urls = [
                SitemapUrl(
                    loc=self._url(f"/companies/{salon.slug}/"),
                    changefreq="monthly",
                    priority="0.8",
                )
                for salon in group
            ]
            files[f"{SITEMAPS_DIR}/companies-sitemap{number}.xml"] = self._urlset(urls)
        return files

    def city_sitemap(self, cities: Sequence[CityView]) -> str:
        urls = [
            SitemapUrl(
                loc=self._url(f"/cities/{city.slug}/"),
                changefreq="weekly",
                priority="0.7",
            )
            for city in cities
        ]
        return self._urlset(urls)

    def state_sitemap(self, states: Sequence[StateView]) -> str:
        urls = [
            SitemapUrl(
                loc=self._url(f"/states/{state.slug}/"),
                changefreq="weekly",
                priority="0.7",
            )
            for state in states
        ]
        return self._urlset(urls)

    def sitemap_index(self, sitemap_paths: Sequence[str], lastmod: str) -> str:
        """Render ``sitemap.xml`` referencing each path (relative to the root)."""
        entries = [
            SitemapEntry(loc=self._url(f"/{path}"), lastmod=lastmod)
            for path in sitemap_paths
        ]
        return self.env.get_template("sitemapindex.xml").render(entries=entries)

    def build(
        self,
        salons: Sequence[SalonView],
        cities: Sequence[CityView],
        states: Sequence[StateView],
        lastmod: Optional[str] = None,
    ) -> Dict[str, str]:
        """
        Render every sitemap file.

        Returns:
            Ordered mapping of relative path to XML content: company chunks,
            cities, states, then the ``sitemap.xml`` index
        """
        files = self.company_sitemaps(salons)
        files[f"{SITEMAPS_DIR}/{CITIES_SITEMAP}"] = self.city_sitemap(cities)
        files[f"{SITEMAPS_DIR}/{STATES_SITEMAP}"] = self.state_sitemap(states)
        files[SITEMAP_INDEX] = self.sitemap_index(
            list(files.keys()), lastmod or isoformat_now()
        )
        return files


__all__ = [
    "SitemapBuilder",
    "SitemapEntry",
    "SitemapUrl",
    "chunk",
    "isoformat_now",
]
