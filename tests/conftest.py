"""Pytest configuration for all tests."""

import json
from datetime import datetime, timezone
from typing import Any

import pytest

from shelfsync.core.config import get_settings

FIXED_NOW = datetime(2024, 3, 15, 12, 30, 45, tzinfo=timezone.utc)


class FakeLevelDbHandle:
    """Minimal stand-in for a ``plyvel.DB`` handle."""

    def __init__(self, owner: "FakeLevelDb") -> None:
        self.owner = owner
        self.closed = False

    def get(self, key: bytes) -> bytes | None:
        assert not self.closed
        return self.owner.data.get(key)

    def put(self, key: bytes, value: bytes) -> None:
        assert not self.closed
        if self.owner.fail_on_put:
            raise OSError("IO error: lock held by another process")
        self.owner.data[key] = value

    def close(self) -> None:
        self.closed = True
        self.owner.open_handles -= 1


class FakeLevelDb:
    """In-memory LevelDB whose ``opener`` is injected into ``LevelDbCatalogStore``."""

    def __init__(self) -> None:
        self.data: dict[bytes, bytes] = {}
        self.open_calls: list[tuple[str, dict[str, Any]]] = []
        self.open_handles = 0
        self.fail_on_open = False
        self.fail_on_put = False

    def opener(self, path: str, **options: Any) -> FakeLevelDbHandle:
        self.open_calls.append((path, options))
        if self.fail_on_open:
            raise OSError(f"IO error: {path}/LOCK: Resource temporarily unavailable")
        self.open_handles += 1
        return FakeLevelDbHandle(self)


def make_record(key: str, value: dict[str, Any] | str | None, **extra: Any) -> dict[str, Any]:
    """Build a raw catalog record the way Steam writes it."""
    record: dict[str, Any] = {"key": key, "timestamp": 1700000000}
    if value is not None:
        record["value"] = value if isinstance(value, str) else json.dumps(value, separators=(",", ":"))
    record.update({"version": "1234", "conflictResolutionMethod": "custom", "strMethodId": "union-collections"})
    record.update(extra)
    return record


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings are cached per process; isolate each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def fake_leveldb() -> FakeLevelDb:
    return FakeLevelDb()


@pytest.fixture
def raw_catalog() -> list[list[Any]]:
    """A catalog with a static, a dynamic, a deleted and an unrelated record."""
    return [
        ["showcases-v1", {"key": "showcases-v1", "timestamp": 1690000000, "value": "[1,2,3]", "version": "7"}],
        [
            "user-collections.uc-RPGoldId1234",
            make_record(
                "user-collections.uc-RPGoldId1234",
                {"id": "uc-RPGoldId1234", "name": "RPG", "added": [9], "removed": []},
            ),
        ],
        [
            "user-collections.uc-dynamic0001",
            make_record(
                "user-collections.uc-dynamic0001",
                {
                    "id": "uc-dynamic0001",
                    "name": "Söme Dynamic",
                    "added": [],
                    "removed": [],
                    "filterSpec": {"nFormatVersion": 2, "strSearchText": "co-op"},
                },
            ),
        ],
        [
            "user-collections.uc-gone00000001",
            {"key": "user-collections.uc-gone00000001", "timestamp": 1680000000, "is_deleted": True, "version": "3"},
        ],
    ]


@pytest.fixture
def raw_catalog_bytes(raw_catalog) -> bytes:
    return json.dumps(raw_catalog, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
