"""Outcome of one synchronization cycle."""

from dataclasses import dataclass, field
from enum import Enum


class CatalogBackend(str, Enum):
    """Physical storage a catalog is read from and written to."""

    FILE = "file"
    LEVELDB = "leveldb"


class SyncStatus(str, Enum):
    """Terminal state of a sync cycle."""

    SUCCESS = "success"
    NOT_APPLICABLE = "not_applicable"
    FAILED = "failed"


@dataclass
class SyncResult:
    """Result handed back to the caller of a sync cycle.

    Attributes:
        status: Terminal state of the cycle.
        backend: Backend the cycle ran against.
        message: Human-readable summary suitable for display.
        collections_written: Number of collection records synthesized and committed.
        parse_failures: Keys of records whose nested value could not be parsed.
    """

    status: SyncStatus
    backend: CatalogBackend
    message: str = ""
    collections_written: int = 0
    parse_failures: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True unless the cycle failed; "not applicable" is not a failure."""
        return self.status is not SyncStatus.FAILED
