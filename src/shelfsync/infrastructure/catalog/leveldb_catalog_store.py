"""Embedded-store catalog: one entry in Steam's Local Storage LevelDB.

Chromium's Local Storage prefixes every value with one byte naming its text
encoding. ShelfSync reads and writes that byte with the same mapping:

    0x00 -> UTF-16-LE
    0x01 -> 8-bit text, read and written as UTF-8
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import plyvel

from shelfsync.core.logging import get_logger
from shelfsync.domain.entities.catalog import Catalog
from shelfsync.domain.entities.errors import BackendIOError, StructuralDecodeError
from shelfsync.domain.entities.sync_result import CatalogBackend
from shelfsync.infrastructure.catalog.base import CatalogStore
from shelfsync.infrastructure.catalog.codec import CatalogCodec, TextEncoding
from shelfsync.infrastructure.catalog.paths import leveldb_catalog_key

logger = get_logger(__name__)

ENCODING_MARKERS: dict[int, TextEncoding] = {
    0x00: TextEncoding.UTF16,
    0x01: TextEncoding.UTF8,
}
MARKER_BYTES: dict[TextEncoding, bytes] = {
    encoding: bytes([marker]) for marker, encoding in ENCODING_MARKERS.items()
}

Opener = Callable[..., Any]


def split_marker(payload: bytes) -> tuple[TextEncoding, bytes]:
    """Split a stored value into its text encoding and catalog bytes.

    Raises:
        StructuralDecodeError: If the value is empty or the marker is unknown.
    """
    if not payload:
        raise StructuralDecodeError("Local Storage value is empty")
    marker = payload[0]
    if marker not in ENCODING_MARKERS:
        raise StructuralDecodeError(f"Unknown Local Storage encoding marker 0x{marker:02x}")
    return ENCODING_MARKERS[marker], payload[1:]


def join_marker(encoding: TextEncoding, data: bytes) -> bytes:
    """Prefix catalog bytes with the marker for their encoding."""
    return MARKER_BYTES[encoding] + data


class LevelDbCatalogStore(CatalogStore):
    """Catalog stored under one composite key in Steam's htmlcache LevelDB.

    The database is opened for each probe, load and commit and closed before
    the call returns. Nothing is held open between a load and the following
    commit, so Steam may write in between; Steam has the same window on its
    own writes.
    """

    backend = CatalogBackend.LEVELDB

    def __init__(
        self,
        database_path: str | Path,
        steam_id3: str,
        codec: CatalogCodec | None = None,
        paranoid_checks: bool = True,
        opener: Opener | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            database_path: Local Storage ``leveldb`` directory.
            steam_id3: Account id the catalog key is namespaced by.
            codec: Codec used for (de)serialization.
            paranoid_checks: Ask LevelDB to verify data aggressively.
            opener: Factory returning a database handle with ``get``, ``put``
                and ``close``. Defaults to ``plyvel.DB``.
        """
        self.database_path = Path(database_path)
        self.steam_id3 = str(steam_id3)
        self.key = leveldb_catalog_key(self.steam_id3)
        self.codec = codec or CatalogCodec()
        self.paranoid_checks = paranoid_checks
        self.opener = opener or plyvel.DB
        # Encoding seen on the last load; commits write the same one back
        self.encoding = TextEncoding.UTF8

    def describe(self) -> str:
        return f"{self.database_path} (account {self.steam_id3})"

    @contextmanager
    def _open(self) -> Iterator[Any]:
        try:
            db = self.opener(
                str(self.database_path),
                create_if_missing=False,
                paranoid_checks=self.paranoid_checks,
            )
        except (plyvel.Error, OSError) as e:
            raise BackendIOError(
                self.backend, f"Cannot open LevelDB at {self.database_path}: {e}"
            ) from e

        try:
            yield db
        except (plyvel.Error, OSError) as e:
            raise BackendIOError(
                self.backend, f"LevelDB operation failed at {self.database_path}: {e}"
            ) from e
        finally:
            db.close()

    def probe(self) -> bool:
        if not self.database_path.is_dir():
            return False
        with self._open() as db:
            return db.get(self.key) is not None

    def load(self) -> Catalog:
        with self._open() as db:
            payload = db.get(self.key)

        if payload is None:
            raise BackendIOError(
                self.backend, f"No catalog for account {self.steam_id3} in {self.database_path}"
            )

        encoding, data = split_marker(payload)
        catalog = self.codec.decode(data, encoding)
        self.encoding = encoding
        logger.debug(
            "Loaded catalog from LevelDB",
            path=str(self.database_path),
            encoding=encoding.value,
            records=len(catalog),
        )
        return catalog

    def commit(self, catalog: Catalog) -> None:
        payload = join_marker(self.encoding, self.codec.encode(catalog, self.encoding))

        with self._open() as db:
            db.put(self.key, payload)

        logger.info(
            "Committed catalog to LevelDB",
            path=str(self.database_path),
            encoding=self.encoding.value,
            records=len(catalog),
        )
