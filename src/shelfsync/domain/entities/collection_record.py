"""Collection record entities.

A catalog record is a JSON object whose ``value`` field is itself a JSON
document serialized to a string. ``CollectionRecord`` keeps the outer
object exactly as it was read, so fields this package does not know about
survive a load/commit cycle untouched. ``CollectionValue`` is the typed view
of the nested document.
"""

import json
from dataclasses import dataclass, field
from typing import Any

from shelfsync.domain.entities.errors import RecordParseError

USER_COLLECTION_PREFIX = "user-collections."
HIDDEN_KEY = "user-collections.hidden"
FAVORITE_KEY = "user-collections.favorite"
RESERVED_KEYS = (HIDDEN_KEY, FAVORITE_KEY)
USER_COLLECTION_ID_PREFIX = "uc-"

# Tags read by Steam's own merge logic when records are written concurrently
CONFLICT_RESOLUTION_METHOD = "custom"
STR_METHOD_ID = "union-collections"


def is_user_collection_key(key: str) -> bool:
    """Check whether a catalog key belongs to the user-collections namespace."""
    return isinstance(key, str) and key.startswith(USER_COLLECTION_PREFIX)


def dump_document(document: dict[str, Any]) -> str:
    """Serialize a nested value document the way Steam writes it (compact, raw UTF-8)."""
    return json.dumps(document, ensure_ascii=False, separators=(",", ":"))


def parse_value_document(key: str, text: Any) -> dict[str, Any]:
    """Parse a record's nested value document.

    Args:
        key: Catalog key of the record, used for error reporting.
        text: The raw ``value`` field.

    Returns:
        The parsed document with its field order preserved.

    Raises:
        RecordParseError: If the value is missing, not a string, not JSON,
            or not a JSON object.
    """
    if text is None:
        raise RecordParseError(key, "record has no value")
    if not isinstance(text, str):
        raise RecordParseError(key, f"value must be a string, got {type(text).__name__}")
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise RecordParseError(key, f"value is not valid JSON: {e.msg}") from e
    if not isinstance(document, dict):
        raise RecordParseError(key, "value is not a JSON object")
    return document


@dataclass
class FilterSpec:
    """Search filter of a dynamic collection.

    Dynamic collections are created inside Steam; they are read and passed
    through, never synthesized here.
    """

    n_format_version: int
    str_search_text: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "nFormatVersion": self.n_format_version,
            "strSearchText": self.str_search_text,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilterSpec":
        return cls(
            n_format_version=int(data.get("nFormatVersion", 0)),
            str_search_text=str(data.get("strSearchText", "")),
        )


@dataclass
class CollectionValue:
    """Typed view of a record's nested value document.

    Attributes:
        id: Collection id, mirrors the id segment of the record key.
        name: Display name (upper-cased for collections written by ShelfSync).
        added: Member game ids.
        removed: Reserved for Steam's own bookkeeping; always empty on our writes.
        filter_spec: Search filter, present only on dynamic collections.
    """

    id: str
    name: str
    added: list[int] = field(default_factory=list)
    removed: list[int] = field(default_factory=list)
    filter_spec: FilterSpec | None = None

    @property
    def is_dynamic(self) -> bool:
        return self.filter_spec is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "added": list(self.added),
            "removed": list(self.removed),
        }
        if self.filter_spec is not None:
            data["filterSpec"] = self.filter_spec.to_dict()
        return data

    def to_json(self) -> str:
        return dump_document(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any], key: str = "") -> "CollectionValue":
        """Build a value from a parsed nested document.

        Raises:
            RecordParseError: If ``added``/``removed`` are not lists of integers.
        """
        filter_data = data.get("filterSpec")
        try:
            return cls(
                id=str(data.get("id", "")),
                name=str(data.get("name", "")),
                added=[int(game_id) for game_id in data.get("added") or []],
                removed=[int(game_id) for game_id in data.get("removed") or []],
                filter_spec=(
                    FilterSpec.from_dict(filter_data) if isinstance(filter_data, dict) else None
                ),
            )
        except (TypeError, ValueError) as e:
            raise RecordParseError(key, f"malformed collection value: {e}") from e

    @classmethod
    def from_json(cls, text: Any, key: str = "") -> "CollectionValue":
        return cls.from_dict(parse_value_document(key, text), key=key)


@dataclass
class CollectionRecord:
    """One record of a catalog, kept as the raw outer JSON object.

    Attributes:
        fields: The record object in its original field order.
    """

    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str | None:
        return self.fields.get("key")

    @property
    def timestamp(self) -> int | None:
        return self.fields.get("timestamp")

    @property
    def value(self) -> Any:
        return self.fields.get("value")

    @property
    def version(self) -> str | None:
        return self.fields.get("version")

    @property
    def is_deleted(self) -> bool:
        return bool(self.fields.get("is_deleted", False))

    def parse_value(self, key: str | None = None) -> dict[str, Any]:
        """Parse the nested value document.

        Raises:
            RecordParseError: If the value cannot be parsed.
        """
        return parse_value_document(key or self.key or "", self.value)

    def with_value(self, value: str) -> "CollectionRecord":
        """Return a copy of this record with ``value`` replaced and every other field kept."""
        fields = dict(self.fields)
        fields["value"] = value
        return CollectionRecord(fields=fields)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.fields)

    @classmethod
    def create(
        cls,
        key: str,
        value: CollectionValue,
        timestamp: int,
        version: str,
    ) -> "CollectionRecord":
        """Create a record in the field order Steam writes.

        Args:
            key: Catalog key.
            value: Nested document, serialized into the ``value`` field.
            timestamp: Seconds since epoch.
            version: Date stamp in ``YYYYMMDD`` form.
        """
        return cls(
            fields={
                "key": key,
                "timestamp": timestamp,
                "value": value.to_json(),
                "version": version,
                "conflictResolutionMethod": CONFLICT_RESOLUTION_METHOD,
                "strMethodId": STR_METHOD_ID,
            }
        )
