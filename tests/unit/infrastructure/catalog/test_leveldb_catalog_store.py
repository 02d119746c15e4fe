"""Unit tests for LevelDbCatalogStore."""

from pathlib import Path

import pytest

from shelfsync.domain.entities.catalog import Catalog
from shelfsync.domain.entities.collection_record import CollectionRecord
from shelfsync.domain.entities.errors import BackendIOError, StructuralDecodeError
from shelfsync.domain.entities.sync_result import CatalogBackend
from shelfsync.infrastructure.catalog.codec import TextEncoding
from shelfsync.infrastructure.catalog.leveldb_catalog_store import (
    LevelDbCatalogStore,
    join_marker,
    split_marker,
)
from shelfsync.infrastructure.catalog.paths import leveldb_catalog_key

STEAM_ID3 = "12345678"
KEY = leveldb_catalog_key(STEAM_ID3)


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    path = tmp_path / "leveldb"
    path.mkdir()
    return path


@pytest.fixture
def store(database_path, fake_leveldb) -> LevelDbCatalogStore:
    return LevelDbCatalogStore(database_path, STEAM_ID3, opener=fake_leveldb.opener)


class TestMarker:
    def test_split(self):
        assert split_marker(b"\x01[]") == (TextEncoding.UTF8, b"[]")
        assert split_marker(b"\x00[\x00]\x00") == (TextEncoding.UTF16, b"[\x00]\x00")

    def test_join_is_symmetric_with_split(self):
        for encoding in TextEncoding:
            assert split_marker(join_marker(encoding, b"data")) == (encoding, b"data")

    @pytest.mark.parametrize("payload", [b"", b"\x02[]", b"[]"])
    def test_rejects_empty_or_unknown_marker(self, payload):
        with pytest.raises(StructuralDecodeError):
            split_marker(payload)


class TestProbe:
    def test_present(self, store, fake_leveldb):
        fake_leveldb.data[KEY] = b"\x01[]"
        assert store.probe() is True
        assert fake_leveldb.open_handles == 0

    def test_key_missing(self, store, fake_leveldb):
        fake_leveldb.data[b"other"] = b"\x01[]"
        assert store.probe() is False
        assert fake_leveldb.open_handles == 0

    def test_directory_missing_does_not_open(self, tmp_path, fake_leveldb):
        store = LevelDbCatalogStore(tmp_path / "nope", STEAM_ID3, opener=fake_leveldb.opener)
        assert store.probe() is False
        assert fake_leveldb.open_calls == []

    def test_open_failure(self, store, fake_leveldb):
        fake_leveldb.fail_on_open = True
        with pytest.raises(BackendIOError) as exc_info:
            store.probe()
        assert exc_info.value.backend is CatalogBackend.LEVELDB


class TestLoad:
    def test_utf8(self, store, fake_leveldb, raw_catalog_bytes):
        fake_leveldb.data[KEY] = b"\x01" + raw_catalog_bytes
        catalog = store.load()

        assert len(catalog) == 4
        assert store.encoding is TextEncoding.UTF8
        assert fake_leveldb.open_handles == 0

    def test_utf16(self, store, fake_leveldb):
        fake_leveldb.data[KEY] = b"\x00" + '[["a",{"key":"a"}]]'.encode("utf-16-le")
        catalog = store.load()

        assert catalog.keys() == ["a"]
        assert store.encoding is TextEncoding.UTF16

    def test_opens_without_creating(self, store, fake_leveldb, database_path):
        fake_leveldb.data[KEY] = b"\x01[]"
        store.load()

        path, options = fake_leveldb.open_calls[0]
        assert path == str(database_path)
        assert options == {"create_if_missing": False, "paranoid_checks": True}

    def test_missing_key(self, store):
        with pytest.raises(BackendIOError):
            store.load()

    def test_malformed_payload(self, store, fake_leveldb):
        fake_leveldb.data[KEY] = b"\x01{}"
        with pytest.raises(StructuralDecodeError):
            store.load()
        assert fake_leveldb.open_handles == 0


class TestCommit:
    def test_writes_marker_and_catalog(self, store, fake_leveldb):
        store.commit(Catalog(entries=[("a", CollectionRecord(fields={"key": "a"}))]))

        assert fake_leveldb.data[KEY] == b'\x01[["a",{"key":"a"}]]'
        assert fake_leveldb.open_handles == 0

    def test_keeps_loaded_encoding(self, store, fake_leveldb):
        fake_leveldb.data[KEY] = b"\x00" + "[]".encode("utf-16-le")
        store.commit(store.load())

        assert fake_leveldb.data[KEY] == b"\x00" + "[]".encode("utf-16-le")

    def test_load_and_commit_are_separate_sessions(self, store, fake_leveldb):
        fake_leveldb.data[KEY] = b"\x01[]"
        store.commit(store.load())
        assert len(fake_leveldb.open_calls) == 2
        assert fake_leveldb.open_handles == 0

    def test_put_failure_closes_handle(self, store, fake_leveldb):
        fake_leveldb.fail_on_put = True
        with pytest.raises(BackendIOError):
            store.commit(Catalog())
        assert fake_leveldb.open_handles == 0


@pytest.mark.leveldb
def test_real_leveldb_round_trip(database_path, raw_catalog_bytes):
    plyvel = pytest.importorskip("plyvel")

    db = plyvel.DB(str(database_path), create_if_missing=True)
    db.put(KEY, b"\x01" + raw_catalog_bytes)
    db.close()

    store = LevelDbCatalogStore(database_path, STEAM_ID3)
    assert store.probe() is True
    catalog = store.load()
    store.commit(catalog)

    db = plyvel.DB(str(database_path))
    try:
        assert db.get(KEY) == b"\x01" + raw_catalog_bytes
    finally:
        db.close()
