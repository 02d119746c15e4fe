"""Unit tests for catalog store construction."""

import pytest

from shelfsync.core.config import Settings
from shelfsync.domain.entities.sync_result import CatalogBackend
from shelfsync.infrastructure.catalog.file_catalog_store import FileCatalogStore
from shelfsync.infrastructure.catalog.leveldb_catalog_store import LevelDbCatalogStore
from shelfsync.infrastructure.catalog.paths import catalog_file_path, leveldb_directory
from shelfsync.infrastructure.catalog.store_factory import candidate_stores, create_catalog_store


def _settings(**overrides) -> Settings:
    values = {"steam_path": None, "local_app_data": None, "leveldb_path": None}
    values.update(overrides)
    return Settings(**values)


def test_file_store(tmp_path):
    store = create_catalog_store(CatalogBackend.FILE, "42", _settings(steam_path=str(tmp_path), backup_on_commit=False))

    assert isinstance(store, FileCatalogStore)
    assert store.path == catalog_file_path(tmp_path, "42")
    assert store.backup is False


def test_leveldb_store_from_local_app_data(tmp_path):
    store = create_catalog_store(CatalogBackend.LEVELDB, "42", _settings(local_app_data=str(tmp_path)))

    assert isinstance(store, LevelDbCatalogStore)
    assert store.database_path == leveldb_directory(tmp_path)
    assert store.steam_id3 == "42"


def test_leveldb_path_override(tmp_path):
    store = create_catalog_store(
        CatalogBackend.LEVELDB,
        "42",
        _settings(local_app_data="/ignored", leveldb_path=str(tmp_path), leveldb_paranoid_checks=False),
    )
    assert store.database_path == tmp_path
    assert store.paranoid_checks is False


@pytest.mark.parametrize("backend", list(CatalogBackend))
def test_missing_configuration(backend):
    with pytest.raises(ValueError):
        create_catalog_store(backend, "42", _settings())


def test_auto_prefers_leveldb(tmp_path):
    stores = candidate_stores("42", _settings(steam_path=str(tmp_path), local_app_data=str(tmp_path)))
    assert [store.backend for store in stores] == [CatalogBackend.LEVELDB, CatalogBackend.FILE]


def test_auto_skips_unconfigured(tmp_path):
    stores = candidate_stores("42", _settings(steam_path=str(tmp_path)))
    assert [store.backend for store in stores] == [CatalogBackend.FILE]


def test_explicit_backend(tmp_path):
    stores = candidate_stores(
        "42", _settings(steam_path=str(tmp_path), local_app_data=str(tmp_path), catalog_backend="file")
    )
    assert [store.backend for store in stores] == [CatalogBackend.FILE]
