"""File catalog store: the whole catalog as one JSON file."""

import os
import shutil
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from shelfsync.core.logging import get_logger
from shelfsync.domain.entities.catalog import Catalog
from shelfsync.domain.entities.errors import BackendIOError
from shelfsync.domain.entities.sync_result import CatalogBackend
from shelfsync.infrastructure.catalog.base import CatalogStore
from shelfsync.infrastructure.catalog.codec import CatalogCodec, TextEncoding

logger = get_logger(__name__)


class FileCatalogStore(CatalogStore):
    """Catalog stored in ``cloud-storage-namespace-1.json``.

    Commits copy the current file to a timestamped sibling before replacing
    it. A failed backup aborts the commit and leaves the original in place.
    """

    backend = CatalogBackend.FILE

    def __init__(
        self,
        path: str | Path,
        codec: CatalogCodec | None = None,
        backup: bool = True,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            path: Catalog file path.
            codec: Codec used for (de)serialization.
            backup: Copy the previous file aside before each commit.
            clock: Local time source for backup names.
        """
        self.path = Path(path)
        self.codec = codec or CatalogCodec()
        self.backup = backup
        self.clock = clock or datetime.now

    def describe(self) -> str:
        return str(self.path)

    def probe(self) -> bool:
        return self.path.is_file()

    def load(self) -> Catalog:
        try:
            data = self.path.read_bytes()
        except OSError as e:
            raise BackendIOError(self.backend, f"Cannot read {self.path}: {e}") from e

        catalog = self.codec.decode(data, TextEncoding.UTF8)
        logger.debug("Loaded catalog file", path=str(self.path), records=len(catalog))
        return catalog

    def backup_path(self) -> Path:
        """Sibling path the current file is copied to before a commit."""
        stamp = self.clock().strftime("%Y%m%d_%H%M%S_%f")
        return self.path.with_name(f"{self.path.stem}.Backup-{stamp}{self.path.suffix}")

    def commit(self, catalog: Catalog) -> None:
        data = self.codec.encode(catalog, TextEncoding.UTF8)

        if self.backup and self.path.exists():
            backup_path = self.backup_path()
            try:
                shutil.copy2(self.path, backup_path)
            except OSError as e:
                raise BackendIOError(
                    self.backend, f"Cannot back up {self.path} to {backup_path}: {e}"
                ) from e
            logger.info("Backed up catalog file", path=str(self.path), backup=str(backup_path))

        # Write beside the target and swap, so a failed write never truncates the catalog
        temp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            temp_path.write_bytes(data)
            os.replace(temp_path, self.path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise BackendIOError(self.backend, f"Cannot write {self.path}: {e}") from e

        logger.info("Committed catalog file", path=str(self.path), records=len(catalog))
