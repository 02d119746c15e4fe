"""Domain services for ShelfSync.

Services contain the merge and identifier logic. They work on in-memory
catalogs only and never touch a storage backend.
"""

from shelfsync.domain.services.collection_id_generator import CollectionIdGenerator
from shelfsync.domain.services.collection_merge_service import (
    CollectionMembership,
    CollectionMergeService,
)
from shelfsync.domain.services.collection_projection import SteamCollection, list_collections
from shelfsync.domain.services.merge_observer import (
    CollectingMergeObserver,
    LoggingMergeObserver,
    MergeObserver,
    MergeStats,
)

__all__ = [
    "CollectingMergeObserver",
    "CollectionIdGenerator",
    "CollectionMembership",
    "CollectionMergeService",
    "LoggingMergeObserver",
    "MergeObserver",
    "MergeStats",
    "SteamCollection",
    "list_collections",
]
