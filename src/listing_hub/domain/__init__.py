"""Domain layer for ListingHub."""
