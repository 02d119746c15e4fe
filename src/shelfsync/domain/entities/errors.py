"""Exceptions raised while loading, merging and committing a catalog.

- CatalogSyncError: base class for everything below
- StructuralDecodeError: the outer catalog is not an array of pairs
- RecordParseError: one record's nested value document is unreadable
- BackendIOError: a catalog store failed to read or write
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shelfsync.domain.entities.sync_result import CatalogBackend


class CatalogSyncError(Exception):
    """Base class for catalog synchronization errors."""


class StructuralDecodeError(CatalogSyncError):
    """Raised when catalog bytes are not a well-formed array of key/record pairs.

    Fatal for the load; the sync cycle is aborted before anything is written.
    """


class RecordParseError(CatalogSyncError):
    """Raised when a record's nested ``value`` document cannot be parsed.

    The merge engine recovers from this locally: the record is left as it
    was and the failure is reported to the merge observer.

    Args:
        key: Catalog key of the offending record.
        message: Human-readable description of the failure.
    """

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(f"{key}: {message}")


class BackendIOError(CatalogSyncError):
    """Raised when a catalog store cannot open, read or write its storage.

    Args:
        backend: The backend that failed.
        message: Human-readable description of the failure.
    """

    def __init__(self, backend: "CatalogBackend", message: str) -> None:
        self.backend = backend
        self.message = message
        super().__init__(f"[{backend.value}] {message}")
