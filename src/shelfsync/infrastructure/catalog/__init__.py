"""Catalog codec and store implementations."""

from shelfsync.infrastructure.catalog.base import CatalogStore
from shelfsync.infrastructure.catalog.codec import CatalogCodec, TextEncoding
from shelfsync.infrastructure.catalog.file_catalog_store import FileCatalogStore
from shelfsync.infrastructure.catalog.leveldb_catalog_store import LevelDbCatalogStore
from shelfsync.infrastructure.catalog.store_factory import (
    candidate_stores,
    create_catalog_store,
)

__all__ = [
    "CatalogCodec",
    "CatalogStore",
    "FileCatalogStore",
    "LevelDbCatalogStore",
    "TextEncoding",
    "candidate_stores",
    "create_catalog_store",
]
