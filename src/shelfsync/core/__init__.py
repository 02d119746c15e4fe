"""Core configuration and logging for ShelfSync."""
