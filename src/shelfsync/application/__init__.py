"""Application layer for ShelfSync."""
