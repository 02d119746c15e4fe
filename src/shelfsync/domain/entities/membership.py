"""Membership snapshot supplied by the caller for each merge.

The snapshot says which games belong to which category right now. How that
is decided (library scraping, user tagging, autocategorization) is up to the
caller; the merge engine only consumes the result.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


def _require_list(value: Any, name: str) -> list[Any]:
    # A string would otherwise be read one character at a time
    if not isinstance(value, list):
        raise ValueError(f"'{name}' must be a list, got {type(value).__name__}")
    return value


def _ordered_unique(game_ids: Iterable[int]) -> list[int]:
    seen: set[int] = set()
    result: list[int] = []
    for game_id in game_ids:
        game_id = int(game_id)
        if game_id not in seen:
            seen.add(game_id)
            result.append(game_id)
    return result


@dataclass(frozen=True)
class GameEntry:
    """One game of the caller's library as far as collections are concerned.

    Attributes:
        id: Steam app id.
        categories: Names of the categories the game is assigned to.
        hidden: Whether the game is hidden in the library.
        favorite: Whether the game is a favorite.
    """

    id: int
    categories: tuple[str, ...] = ()
    hidden: bool = False
    favorite: bool = False


@dataclass
class MembershipSnapshot:
    """Category membership at one point in time.

    Attributes:
        categories: Authoritative category list. Every name here gets a
            collection even when it has no members.
        members: Category name to ordered member game ids. Names may use any
            casing; the merge engine folds them.
        hidden: Hidden game ids.
        favorite: Favorite game ids.
    """

    categories: list[str] = field(default_factory=list)
    members: dict[str, list[int]] = field(default_factory=dict)
    hidden: list[int] = field(default_factory=list)
    favorite: list[int] = field(default_factory=list)

    @classmethod
    def from_games(
        cls, games: Iterable[GameEntry], categories: Iterable[str] = ()
    ) -> "MembershipSnapshot":
        """Build a snapshot by scanning game entries.

        Args:
            games: Library entries to scan.
            categories: Authoritative category list (categories without members included).

        Returns:
            A snapshot with member lists in scan order.
        """
        members: dict[str, list[int]] = {}
        hidden: list[int] = []
        favorite: list[int] = []

        for game in games:
            if game.hidden:
                hidden.append(game.id)
            if game.favorite:
                favorite.append(game.id)
            for name in game.categories:
                members.setdefault(name, []).append(game.id)

        return cls(
            categories=list(categories),
            members={name: _ordered_unique(ids) for name, ids in members.items()},
            hidden=_ordered_unique(hidden),
            favorite=_ordered_unique(favorite),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MembershipSnapshot":
        """Build a snapshot from its JSON form.

        Expected shape::

            {"categories": [...], "members": {"Action": [10, 20]},
             "hidden": [...], "favorite": [...]}

        Raises:
            ValueError: If the shape is wrong or an id is not an integer.
        """
        if not isinstance(data, dict):
            raise ValueError("Snapshot must be a JSON object")
        members = data.get("members") or {}
        if not isinstance(members, dict):
            raise ValueError("'members' must map category names to lists of game ids")
        for name, ids in members.items():
            _require_list(ids, f"members[{name!r}]")
        categories = _require_list(data.get("categories") or [], "categories")
        try:
            return cls(
                categories=[str(name) for name in categories],
                members={str(name): _ordered_unique(ids) for name, ids in members.items()},
                hidden=_ordered_unique(_require_list(data.get("hidden") or [], "hidden")),
                favorite=_ordered_unique(_require_list(data.get("favorite") or [], "favorite")),
            )
        except TypeError as e:
            raise ValueError(f"Invalid snapshot: {e}") from e
