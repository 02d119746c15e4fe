"""Collection ID generator service.

Derives the short id Steam uses in ``user-collections.uc-<id>`` keys from a
category name. The id is a pure function of the case-folded name, so the
same category maps to the same record on every run and every machine,
without keeping a registry of issued ids.
"""

import base64
import hashlib
import re

from shelfsync.domain.entities.collection_record import (
    USER_COLLECTION_ID_PREFIX,
    USER_COLLECTION_PREFIX,
)


class CollectionIdGenerator:
    """Generator for deterministic collection ids.

    The id is the SHA-256 digest of the lower-cased UTF-8 name, base64
    encoded with the URL-safe alphabet, stripped of every non-alphanumeric
    character, and truncated to 12 characters.

    Example ids: ``pYz0kM8Cq1aF``, ``Qh3b7TtV0mZs``
    """

    ID_LENGTH = 12

    PATTERN = re.compile(r"^[A-Za-z0-9]{12}$")
    _NON_ALNUM = re.compile(r"[^A-Za-z0-9]")

    @classmethod
    def generate(cls, name: str) -> str:
        """Generate the id for a category name.

        Args:
            name: Category name in any casing. May be empty.

        Returns:
            A 12 character alphanumeric id.

        Examples:
            >>> CollectionIdGenerator.generate("Action") == CollectionIdGenerator.generate("ACTION")
            True
            >>> len(CollectionIdGenerator.generate(""))
            12
        """
        # str.lower() is locale independent, unlike the platform's casing APIs
        digest = hashlib.sha256(name.lower().encode("utf-8")).digest()
        encoded = base64.urlsafe_b64encode(digest).decode("ascii")
        return cls._NON_ALNUM.sub("", encoded)[: cls.ID_LENGTH]

    @classmethod
    def collection_id(cls, name: str) -> str:
        """The nested document id for a category, e.g. ``uc-pYz0kM8Cq1aF``."""
        return f"{USER_COLLECTION_ID_PREFIX}{cls.generate(name)}"

    @classmethod
    def collection_key(cls, name: str) -> str:
        """The catalog key for a category, e.g. ``user-collections.uc-pYz0kM8Cq1aF``."""
        return f"{USER_COLLECTION_PREFIX}{cls.collection_id(name)}"

    @classmethod
    def validate(cls, collection_id: str) -> bool:
        """Check that a string has the shape of a generated id (without the ``uc-`` prefix)."""
        if not isinstance(collection_id, str):
            return False
        return bool(cls.PATTERN.match(collection_id))
