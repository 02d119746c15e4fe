"""Collection merge service.

Rewrites the ``user-collections.*`` part of a catalog from a membership
snapshot while leaving every other record alone:

1. Fold the snapshot into one entry per collection key (hidden, favorite,
   then one per case-insensitive category name).
2. Reset ``added`` to ``[]`` on every existing user collection, keeping all
   other nested fields. Records whose value does not parse are left as they
   are and reported to the observer.
3. Synthesize a fresh record for each folded entry.
4. Overlay the fresh records on the catalog by key. Existing keys keep their
   position; new keys are appended in synthesis order.

Existing user collections are never removed. A category that lost all of its
games still has a record afterwards, with an empty ``added`` list.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from shelfsync.domain.entities.catalog import Catalog
from shelfsync.domain.entities.collection_record import (
    FAVORITE_KEY,
    HIDDEN_KEY,
    CollectionRecord,
    CollectionValue,
    dump_document,
    is_user_collection_key,
)
from shelfsync.domain.entities.errors import RecordParseError
from shelfsync.domain.entities.membership import MembershipSnapshot
from shelfsync.domain.services.collection_id_generator import CollectionIdGenerator
from shelfsync.domain.services.merge_observer import (
    LoggingMergeObserver,
    MergeObserver,
    MergeStats,
)

HIDDEN_COLLECTION_ID = "hidden"
FAVORITE_COLLECTION_ID = "favorite"
HIDDEN_COLLECTION_NAME = "HIDDEN"
FAVORITE_COLLECTION_NAME = "FAVORITE"


@dataclass
class CollectionMembership:
    """Members of one collection after the snapshot has been folded.

    Attributes:
        key: Catalog key.
        id: Nested document id.
        name: Display name written to the nested document.
        added: Ordered, de-duplicated member game ids.
    """

    key: str
    id: str
    name: str
    added: list[int] = field(default_factory=list)
    _seen: set[int] = field(default_factory=set, repr=False, compare=False)

    def add(self, game_ids: Iterable[int]) -> None:
        for game_id in game_ids:
            game_id = int(game_id)
            if game_id not in self._seen:
                self._seen.add(game_id)
                self.added.append(game_id)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CollectionMergeService:
    """Merge a membership snapshot into a catalog.

    The service is stateless between calls; the clock and observer are
    injected so a merge can be reproduced exactly in tests.
    """

    def __init__(
        self,
        observer: MergeObserver | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            observer: Receives parse failures and merge statistics.
                Defaults to a structlog-backed observer.
            clock: Returns the current UTC time. Defaults to ``datetime.now``.
        """
        self.observer = observer or LoggingMergeObserver()
        self.clock = clock or _utc_now

    def build_memberships(self, snapshot: MembershipSnapshot) -> dict[str, CollectionMembership]:
        """Fold a snapshot into one membership per collection key.

        Category names are compared case-insensitively: "Action" and "ACTION"
        land in the same collection, displayed as "ACTION". Ids fold with
        ``str.lower()`` so they match ids Steam tools already wrote, and
        display names with ``str.upper()``. The two are not inverses: "Straße"
        and "STRASSE" get different ids but the same display name.

        Returns:
            Memberships keyed by catalog key, hidden and favorite first, then
            categories in the order they were first seen (authoritative list
            before the member map).
        """
        memberships: dict[str, CollectionMembership] = {
            HIDDEN_KEY: CollectionMembership(
                key=HIDDEN_KEY, id=HIDDEN_COLLECTION_ID, name=HIDDEN_COLLECTION_NAME
            ),
            FAVORITE_KEY: CollectionMembership(
                key=FAVORITE_KEY, id=FAVORITE_COLLECTION_ID, name=FAVORITE_COLLECTION_NAME
            ),
        }
        memberships[HIDDEN_KEY].add(snapshot.hidden)
        memberships[FAVORITE_KEY].add(snapshot.favorite)

        def category(name: str) -> CollectionMembership:
            key = CollectionIdGenerator.collection_key(name)
            if key not in memberships:
                memberships[key] = CollectionMembership(
                    key=key,
                    id=CollectionIdGenerator.collection_id(name),
                    name=name.upper(),
                )
            return memberships[key]

        for name in snapshot.categories:
            category(name)
        for name, game_ids in snapshot.members.items():
            category(name).add(game_ids)

        return memberships

    def clear_added(self, catalog: Catalog, stats: MergeStats | None = None) -> Catalog:
        """Return a copy of the catalog with every user collection's ``added`` emptied.

        Non-collection records and records whose value does not parse are
        carried over unchanged. Deleted records without a value have nothing
        to reset and are carried over silently.
        """
        stats = stats if stats is not None else MergeStats()
        entries: list[tuple[str, CollectionRecord]] = []

        for key, record in catalog:
            if not is_user_collection_key(key) or (record.is_deleted and record.value is None):
                entries.append((key, record))
                continue
            try:
                document = record.parse_value(key)
            except RecordParseError as e:
                stats.skipped_records += 1
                self.observer.record_parse_failed(e)
                entries.append((key, record))
                continue

            document["added"] = []
            entries.append((key, record.with_value(dump_document(document))))
            stats.cleared_records += 1

        return Catalog(entries=entries)

    def synthesize(self, memberships: dict[str, CollectionMembership]) -> list[CollectionRecord]:
        """Create one fresh record per membership, all sharing one timestamp and version."""
        now = self.clock()
        timestamp = int(now.timestamp())
        version = now.strftime("%Y%m%d")

        return [
            CollectionRecord.create(
                key=membership.key,
                value=CollectionValue(
                    id=membership.id,
                    name=membership.name,
                    added=list(membership.added),
                    removed=[],
                ),
                timestamp=timestamp,
                version=version,
            )
            for membership in memberships.values()
        ]

    def merge(self, existing: Catalog, snapshot: MembershipSnapshot) -> Catalog:
        """Merge a membership snapshot into a catalog.

        Args:
            existing: Catalog as loaded from a store. Not modified.
            snapshot: Current category membership.

        Returns:
            A new catalog: the existing keys in their original order, followed
            by keys introduced by the snapshot.
        """
        stats = MergeStats(existing_records=len(existing))

        base = self.clear_added(existing, stats).to_keyed()
        overlay = self.synthesize(self.build_memberships(snapshot))

        for record in overlay:
            key = record.key or ""
            if key not in base:
                stats.new_records += 1
            # Whole-record replacement, a stale is_deleted flag does not survive
            base[key] = record
        stats.synthesized_records = len(overlay)

        self.observer.merge_completed(stats)
        return Catalog.from_keyed(base)

    def set_added(self, catalog: Catalog, key: str, game_ids: Iterable[int]) -> bool:
        """Replace the ``added`` list of one record in place.

        Args:
            catalog: Catalog to edit.
            key: Catalog key of the record.
            game_ids: New member ids.

        Returns:
            True if a record was updated, False when the key is absent or the
            record has no value.

        Raises:
            RecordParseError: If the record's value cannot be parsed.
        """
        updated = False
        added = [int(game_id) for game_id in game_ids]

        for index, (entry_key, record) in enumerate(catalog.entries):
            if entry_key != key or record.value is None:
                continue
            document = record.parse_value(key)
            document["added"] = list(added)
            catalog.entries[index] = (entry_key, record.with_value(dump_document(document)))
            updated = True

        return updated
