"""Command-line interface for ListingHub."""

from .build import main

__all__ = ["main"]
