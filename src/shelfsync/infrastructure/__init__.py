"""Infrastructure layer for ShelfSync: catalog storage backends."""
