"""Configuration management for ListingHub.

Usage:
    >>> from listing_hub.config import get_settings
    >>> settings = get_settings()
    >>> site = settings.load_site()
"""

from listing_hub.config.settings import (
    Settings,
    SiteConfig,
    SiteConfigError,
    get_settings,
    load_site_config,
)

__all__ = [
    "Settings",
    "SiteConfig",
    "SiteConfigError",
    "get_settings",
    "load_site_config",
]
