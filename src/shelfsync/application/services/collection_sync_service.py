"""Collection sync service.

Entry point for callers: runs one probe/load/merge/commit cycle against a
catalog store and reports the outcome as a ``SyncResult``. Storage and
decode failures are turned into a failed result naming the backend; they do
not escape as exceptions.
"""

import uuid
from collections.abc import Callable, Iterable
from datetime import datetime

from shelfsync.core.logging import LoggingContext, get_logger
from shelfsync.domain.entities.errors import CatalogSyncError
from shelfsync.domain.entities.membership import MembershipSnapshot
from shelfsync.domain.entities.sync_result import SyncResult, SyncStatus
from shelfsync.domain.services.collection_merge_service import CollectionMergeService
from shelfsync.domain.services.collection_projection import SteamCollection, list_collections
from shelfsync.domain.services.merge_observer import (
    CollectingMergeObserver,
    LoggingMergeObserver,
    MergeObserver,
)
from shelfsync.infrastructure.catalog.base import CatalogStore

logger = get_logger(__name__)


class CollectionSyncService:
    """Synchronize a membership snapshot into Steam's collections catalog."""

    def __init__(
        self,
        observer: MergeObserver | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            observer: Receives merge events in addition to the result's own
                bookkeeping. Defaults to logging them.
            clock: UTC time source passed to the merge engine.
        """
        self.observer = observer or LoggingMergeObserver()
        self.clock = clock

    def sync(self, store: CatalogStore, snapshot: MembershipSnapshot) -> SyncResult:
        """Run one sync cycle.

        Either the whole merged catalog is committed or nothing is written.

        Args:
            store: Catalog store to sync.
            snapshot: Current category membership.

        Returns:
            SUCCESS after a commit, NOT_APPLICABLE when the store has no
            catalog on this installation, FAILED on load or commit errors.
        """
        backend = store.backend
        correlation_id = f"sync_{uuid.uuid4().hex[:12]}"

        with LoggingContext(correlation_id=correlation_id, backend=backend.value):
            try:
                if not store.probe():
                    logger.info("Catalog store not present", location=store.describe())
                    return SyncResult(
                        status=SyncStatus.NOT_APPLICABLE,
                        backend=backend,
                        message=f"No {backend.value} catalog found at {store.describe()}",
                    )

                existing = store.load()
            except CatalogSyncError as e:
                logger.error("Failed to load catalog", location=store.describe(), error=str(e))
                return SyncResult(
                    status=SyncStatus.FAILED,
                    backend=backend,
                    message=f"Failed to load {backend.value} catalog: {e}",
                )

            collector = CollectingMergeObserver(forward_to=self.observer)
            merged = CollectionMergeService(observer=collector, clock=self.clock).merge(
                existing, snapshot
            )
            parse_failures = [error.key for error in collector.parse_failures]
            written = collector.stats.synthesized_records if collector.stats else 0

            try:
                store.commit(merged)
            except CatalogSyncError as e:
                logger.error("Failed to commit catalog", location=store.describe(), error=str(e))
                return SyncResult(
                    status=SyncStatus.FAILED,
                    backend=backend,
                    message=f"Failed to save {backend.value} catalog: {e}",
                    parse_failures=parse_failures,
                )

            logger.info(
                "Synchronized collections",
                location=store.describe(),
                collections_written=written,
                parse_failures=len(parse_failures),
            )
            return SyncResult(
                status=SyncStatus.SUCCESS,
                backend=backend,
                message=f"Saved {written} collections to {store.describe()}",
                collections_written=written,
                parse_failures=parse_failures,
            )

    def sync_first_supported(
        self, stores: Iterable[CatalogStore], snapshot: MembershipSnapshot
    ) -> SyncResult | None:
        """Sync the first store that is present on this installation.

        Returns:
            The result of the first cycle that was not NOT_APPLICABLE, the last
            NOT_APPLICABLE result if no store applies, or None when ``stores``
            is empty.
        """
        result: SyncResult | None = None
        for store in stores:
            result = self.sync(store, snapshot)
            if result.status is not SyncStatus.NOT_APPLICABLE:
                return result
        return result

    def list_collections(self, store: CatalogStore) -> list[SteamCollection]:
        """Load a store and list its live user collections.

        Raises:
            StructuralDecodeError: If the stored catalog is malformed.
            BackendIOError: If the store cannot be read.
        """
        return list_collections(store.load(), observer=self.observer)
