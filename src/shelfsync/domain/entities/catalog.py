"""Catalog entity: the ordered list of key/record pairs Steam persists per account."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from shelfsync.domain.entities.collection_record import CollectionRecord, is_user_collection_key


@dataclass
class Catalog:
    """Ordered sequence of ``(key, CollectionRecord)`` pairs.

    Order is kept as loaded. Keys are logically unique; when a key repeats,
    the later pair wins in every keyed view.
    """

    entries: list[tuple[str, CollectionRecord]] = field(default_factory=list)

    def __iter__(self) -> Iterator[tuple[str, CollectionRecord]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return any(entry_key == key for entry_key, _ in self.entries)

    def keys(self) -> list[str]:
        """Distinct keys in order of first appearance."""
        return list(self.to_keyed())

    def get(self, key: str) -> CollectionRecord | None:
        """Return the effective record for a key, or None."""
        return self.to_keyed().get(key)

    def user_collections(self) -> list[tuple[str, CollectionRecord]]:
        """Effective ``user-collections.*`` pairs, in catalog order."""
        return [(key, record) for key, record in self.to_keyed().items() if is_user_collection_key(key)]

    def to_keyed(self) -> dict[str, CollectionRecord]:
        """Collapse the catalog into a dict.

        A later pair with the same key replaces the earlier record but keeps
        the position where the key first appeared.
        """
        keyed: dict[str, CollectionRecord] = {}
        for key, record in self.entries:
            keyed[key] = record
        return keyed

    @classmethod
    def from_keyed(cls, keyed: dict[str, CollectionRecord]) -> "Catalog":
        return cls(entries=list(keyed.items()))

    @classmethod
    def from_records(cls, records: Iterable[CollectionRecord]) -> "Catalog":
        """Build a catalog from records, keying each pair by the record's own key."""
        return cls(entries=[(record.key or "", record) for record in records])
