"""ShelfSync - push game categories into Steam's library collections.

Merges an externally computed category membership into the collections
catalog Steam keeps per account, either in its cloud-storage JSON file or
in the Local Storage LevelDB of its embedded browser.
"""

__version__ = "0.1.0"

from shelfsync.application.services.collection_sync_service import CollectionSyncService
from shelfsync.domain.entities.membership import GameEntry, MembershipSnapshot
from shelfsync.domain.entities.sync_result import CatalogBackend, SyncResult, SyncStatus

__all__ = [
    "CatalogBackend",
    "CollectionSyncService",
    "GameEntry",
    "MembershipSnapshot",
    "SyncResult",
    "SyncStatus",
    "__version__",
]
