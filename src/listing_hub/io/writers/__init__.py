from .site_writer import SiteWriter

__all__ = ["SiteWriter"]
