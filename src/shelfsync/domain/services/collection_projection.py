"""Read-side view of the user collections stored in a catalog."""

from dataclasses import dataclass

from shelfsync.domain.entities.catalog import Catalog
from shelfsync.domain.entities.collection_record import (
    FAVORITE_KEY,
    HIDDEN_KEY,
    CollectionValue,
)
from shelfsync.domain.entities.errors import RecordParseError
from shelfsync.domain.services.merge_observer import LoggingMergeObserver, MergeObserver


@dataclass
class SteamCollection:
    """A live user collection as Steam would show it."""

    key: str
    value: CollectionValue

    @property
    def id(self) -> str:
        return self.value.id

    @property
    def name(self) -> str:
        return self.value.name

    @property
    def added(self) -> list[int]:
        return self.value.added

    @property
    def is_dynamic(self) -> bool:
        return self.value.is_dynamic

    @property
    def is_hidden(self) -> bool:
        return self.key == HIDDEN_KEY

    @property
    def is_favorite(self) -> bool:
        return self.key == FAVORITE_KEY


def list_collections(catalog: Catalog, observer: MergeObserver | None = None) -> list[SteamCollection]:
    """List the non-deleted user collections of a catalog.

    Records whose nested value cannot be parsed are skipped and reported to
    the observer.

    Args:
        catalog: Catalog to read.
        observer: Receives parse failures. Defaults to logging them.

    Returns:
        Collections in catalog order.
    """
    observer = observer or LoggingMergeObserver()
    collections: list[SteamCollection] = []

    for key, record in catalog.user_collections():
        if record.is_deleted:
            continue
        try:
            value = CollectionValue.from_json(record.value, key=key)
        except RecordParseError as e:
            observer.record_parse_failed(e)
            continue
        collections.append(SteamCollection(key=key, value=value))

    return collections
