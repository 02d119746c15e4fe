"""Catalog codec: bytes <-> ``Catalog``.

The outer catalog is a JSON array of ``[key, record]`` pairs. Each record's
``value`` is left as the opaque string it was stored as; only the domain
layer parses it.
"""

import json
from collections.abc import Callable
from enum import Enum
from typing import Any

from shelfsync.core.logging import get_logger
from shelfsync.domain.entities.catalog import Catalog
from shelfsync.domain.entities.collection_record import CollectionRecord
from shelfsync.domain.entities.errors import StructuralDecodeError

logger = get_logger(__name__)


class TextEncoding(str, Enum):
    """Text encodings a catalog can be stored in."""

    UTF8 = "utf-8"
    UTF16 = "utf-16-le"


MalformedHandler = Callable[[int, Any], None]


def _log_malformed(index: int, element: Any) -> None:
    logger.warning(
        "Skipping malformed catalog element",
        index=index,
        element_type=type(element).__name__,
    )


class CatalogCodec:
    """Decode and encode catalogs.

    Args:
        strict: Raise on malformed elements instead of skipping them.
        on_malformed: Called with ``(index, element)`` for every skipped
            element. Defaults to logging a warning.
    """

    def __init__(self, strict: bool = False, on_malformed: MalformedHandler | None = None) -> None:
        self.strict = strict
        self.on_malformed = on_malformed or _log_malformed

    def decode(self, data: bytes, encoding: TextEncoding = TextEncoding.UTF8) -> Catalog:
        """Decode catalog bytes.

        Args:
            data: Raw catalog bytes (without any storage marker byte).
            encoding: Text encoding of ``data``.

        Returns:
            The decoded catalog, in source order.

        Raises:
            StructuralDecodeError: If the bytes are not text in ``encoding``,
                not JSON, or not a JSON array; or, in strict mode, if any
                element is not a ``[string, object]`` pair.
        """
        try:
            text = data.decode(encoding.value)
        except UnicodeDecodeError as e:
            raise StructuralDecodeError(f"Catalog is not valid {encoding.value} text: {e}") from e

        # A UTF-8 BOM is legal in the file but not in JSON
        if text.startswith("\ufeff"):
            text = text[1:]

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise StructuralDecodeError(
                f"Catalog is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})"
            ) from e

        if not isinstance(parsed, list):
            raise StructuralDecodeError(
                f"Catalog must be a JSON array of pairs, got {type(parsed).__name__}"
            )

        entries: list[tuple[str, CollectionRecord]] = []
        for index, element in enumerate(parsed):
            if (
                isinstance(element, list)
                and len(element) == 2
                and isinstance(element[0], str)
                and isinstance(element[1], dict)
            ):
                entries.append((element[0], CollectionRecord(fields=element[1])))
                continue
            if self.strict:
                raise StructuralDecodeError(
                    f"Catalog element {index} is not a [key, record] pair"
                )
            self.on_malformed(index, element)

        return Catalog(entries=entries)

    def encode(self, catalog: Catalog, encoding: TextEncoding = TextEncoding.UTF8) -> bytes:
        """Encode a catalog as compact JSON in the given encoding.

        Non-ASCII text is written as-is. A catalog holding text the encoding
        cannot represent (a lone surrogate carried in from an escape) is
        written with ASCII escapes instead, so that text round-trips.
        """
        payload = [[key, record.to_dict()] for key, record in catalog]
        text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        try:
            return text.encode(encoding.value)
        except UnicodeEncodeError:
            logger.debug("Catalog holds unencodable text, writing ASCII escapes")
            return json.dumps(payload, ensure_ascii=True, separators=(",", ":")).encode(encoding.value)
