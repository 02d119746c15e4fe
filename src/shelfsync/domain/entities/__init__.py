"""Domain entities for ShelfSync.

Entities are plain Python dataclasses describing catalogs, their records and
the membership snapshots merged into them. They have no dependencies on
storage backends.
"""

from shelfsync.domain.entities.catalog import Catalog
from shelfsync.domain.entities.collection_record import (
    FAVORITE_KEY,
    HIDDEN_KEY,
    USER_COLLECTION_PREFIX,
    CollectionRecord,
    CollectionValue,
    FilterSpec,
    is_user_collection_key,
)
from shelfsync.domain.entities.errors import (
    BackendIOError,
    CatalogSyncError,
    RecordParseError,
    StructuralDecodeError,
)
from shelfsync.domain.entities.membership import GameEntry, MembershipSnapshot
from shelfsync.domain.entities.sync_result import CatalogBackend, SyncResult, SyncStatus

__all__ = [
    "BackendIOError",
    "Catalog",
    "CatalogBackend",
    "CatalogSyncError",
    "CollectionRecord",
    "CollectionValue",
    "FAVORITE_KEY",
    "FilterSpec",
    "GameEntry",
    "HIDDEN_KEY",
    "MembershipSnapshot",
    "RecordParseError",
    "StructuralDecodeError",
    "SyncResult",
    "SyncStatus",
    "USER_COLLECTION_PREFIX",
    "is_user_collection_key",
]
