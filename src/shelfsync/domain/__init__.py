"""Domain layer for ShelfSync."""
