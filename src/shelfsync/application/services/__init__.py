"""Application services orchestrating domain logic and catalog stores."""

from shelfsync.application.services.collection_sync_service import CollectionSyncService

__all__ = ["CollectionSyncService"]
