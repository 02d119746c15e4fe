"""Unit tests for the read-side collection projection."""

from shelfsync.domain.entities.catalog import Catalog
from shelfsync.domain.entities.collection_record import CollectionRecord
from shelfsync.domain.services.collection_projection import list_collections
from shelfsync.domain.services.merge_observer import CollectingMergeObserver
from tests.conftest import make_record


def _catalog(raw: list) -> Catalog:
    return Catalog(entries=[(key, CollectionRecord(fields=record)) for key, record in raw])


def test_lists_live_collections(raw_catalog):
    collections = list_collections(_catalog(raw_catalog), observer=CollectingMergeObserver())

    assert [c.key for c in collections] == [
        "user-collections.uc-RPGoldId1234",
        "user-collections.uc-dynamic0001",
    ]
    rpg, dynamic = collections
    assert rpg.name == "RPG"
    assert rpg.added == [9]
    assert rpg.is_dynamic is False
    assert dynamic.is_dynamic is True
    assert dynamic.value.filter_spec.str_search_text == "co-op"


def test_flags_reserved_collections():
    raw = [
        ["user-collections.hidden", make_record("user-collections.hidden", {"id": "hidden", "added": [1], "removed": []})],
        ["user-collections.favorite", make_record("user-collections.favorite", {"id": "favorite", "added": [], "removed": []})],
    ]
    hidden, favorite = list_collections(_catalog(raw), observer=CollectingMergeObserver())

    assert hidden.is_hidden is True and hidden.is_favorite is False
    assert favorite.is_favorite is True
    assert hidden.id == "hidden"


def test_skips_and_reports_unparseable():
    raw = [["user-collections.uc-bad", make_record("user-collections.uc-bad", "{{")]]
    observer = CollectingMergeObserver()

    assert list_collections(_catalog(raw), observer=observer) == []
    assert observer.parse_failures[0].key == "user-collections.uc-bad"
