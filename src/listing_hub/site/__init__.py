"""
Static site generation: HTML pages, XML sitemaps and build orchestration.
"""

from .builder import build_site
from .renderer import PageRenderer, create_environment, excerpt
from .sitemaps import SitemapBuilder, chunk

__all__ = [
    "PageRenderer",
    "SitemapBuilder",
    "build_site",
    "chunk",
    "create_environment",
    "excerpt",
]
