"""Base abstraction for catalog stores."""

from abc import ABC, abstractmethod

from shelfsync.domain.entities.catalog import Catalog
from shelfsync.domain.entities.sync_result import CatalogBackend


class CatalogStore(ABC):
    """A place Steam persists one account's collections catalog.

    Implementations open their underlying storage for the duration of a
    single call and release it before returning, on success or failure.
    """

    backend: CatalogBackend

    @abstractmethod
    def probe(self) -> bool:
        """Check whether this installation has a catalog in this store. No side effects."""
        ...

    @abstractmethod
    def load(self) -> Catalog:
        """Read and decode the catalog.

        Raises:
            StructuralDecodeError: If the stored catalog is malformed.
            BackendIOError: If the storage cannot be read.
        """
        ...

    @abstractmethod
    def commit(self, catalog: Catalog) -> None:
        """Encode and write the catalog, replacing the stored one.

        Raises:
            BackendIOError: If the storage cannot be written.
        """
        ...

    @abstractmethod
    def describe(self) -> str:
        """Human-readable location of the catalog, for logs and messages."""
        ...
