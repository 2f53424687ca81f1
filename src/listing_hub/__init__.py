"""
ListingHub - static directory site generator.

Reads a zipped set of CSV tables (salons, cities, states, categories),
cross-links them into a resolved graph and renders a static website with
JSON data dumps and XML sitemaps.
"""

__version__ = "0.1.0"
