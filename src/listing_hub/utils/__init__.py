"""Shared utilities for ListingHub."""
