"""End-to-end sync cycles against a Steam-like directory tree."""

import json

from shelfsync.application.services.collection_sync_service import CollectionSyncService
from shelfsync.core.config import Settings
from shelfsync.domain.entities.membership import GameEntry, MembershipSnapshot
from shelfsync.domain.entities.sync_result import CatalogBackend, SyncStatus
from shelfsync.domain.services.collection_id_generator import CollectionIdGenerator
from shelfsync.infrastructure.catalog.paths import catalog_file_path
from shelfsync.infrastructure.catalog.store_factory import create_catalog_store


def _collections(path) -> dict[str, dict]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return {
        key: json.loads(record["value"])
        for key, record in data
        if key.startswith("user-collections.") and "value" in record
    }


def test_repeated_syncs(tmp_path, raw_catalog_bytes):
    path = catalog_file_path(tmp_path, "42")
    path.parent.mkdir(parents=True)
    path.write_bytes(raw_catalog_bytes)

    settings = Settings(steam_path=str(tmp_path), local_app_data=None, _env_file=None)
    store = create_catalog_store(CatalogBackend.FILE, "42", settings)
    service = CollectionSyncService()

    games = [
        GameEntry(id=1, categories=("Action",)),
        GameEntry(id=2, hidden=True),
        GameEntry(id=3, categories=("action", "RPG"), favorite=True),
    ]
    first = service.sync(store, MembershipSnapshot.from_games(games, categories=["Action", "Strategy"]))
    assert first.status is SyncStatus.SUCCESS

    collections = _collections(path)
    assert collections[CollectionIdGenerator.collection_key("Action")]["added"] == [1, 3]
    assert collections[CollectionIdGenerator.collection_key("Strategy")]["added"] == []
    assert collections["user-collections.hidden"]["added"] == [2]
    assert collections["user-collections.favorite"]["added"] == [3]
    # Unrelated records survive verbatim
    assert json.loads(path.read_text(encoding="utf-8"))[0] == json.loads(raw_catalog_bytes)[0]

    second = service.sync(store, MembershipSnapshot(categories=["Action"]))
    assert second.status is SyncStatus.SUCCESS

    collections = _collections(path)
    assert collections[CollectionIdGenerator.collection_key("Action")]["added"] == []
    assert collections[CollectionIdGenerator.collection_key("RPG")]["added"] == []
    assert collections["user-collections.uc-RPGoldId1234"]["added"] == []
    assert collections["user-collections.uc-dynamic0001"]["filterSpec"]["strSearchText"] == "co-op"

    backups = sorted(p for p in path.parent.iterdir() if ".Backup-" in p.name)
    assert len(backups) == 2
    assert backups[0].read_bytes() == raw_catalog_bytes


def test_missing_catalog_is_not_applicable(tmp_path):
    settings = Settings(steam_path=str(tmp_path), _env_file=None)
    store = create_catalog_store(CatalogBackend.FILE, "42", settings)

    result = CollectionSyncService().sync(store, MembershipSnapshot(members={"Action": [1]}))

    assert result.status is SyncStatus.NOT_APPLICABLE
    assert not catalog_file_path(tmp_path, "42").exists()
