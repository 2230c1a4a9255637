"""In-memory stand-ins for the media server ports."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from topten.domain.errors import CollaboratorError
from topten.domain.model import ActivityRecord, CatalogItem, Grouping, ItemKind

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from datetime import datetime

    from topten.domain.cancellation import CancellationToken


def movie(item_id: str, name: str | None = None) -> CatalogItem:
    return CatalogItem(id=item_id, name=name or item_id, kind=ItemKind.MOVIE)


def series(item_id: str, name: str | None = None) -> CatalogItem:
    return CatalogItem(id=item_id, name=name or item_id, kind=ItemKind.SERIES)


def episode(item_id: str, series_id: str) -> CatalogItem:
    return CatalogItem(id=item_id, name=item_id, kind=ItemKind.EPISODE, series_id=series_id)


@dataclass
class FakeMediaServer:
    """Implements every port over plain dictionaries and records each call."""

    items: list[CatalogItem] = field(default_factory=list)
    users: list[str] = field(default_factory=list)
    plays: dict[tuple[str, str], datetime] = field(default_factory=dict)
    groupings: dict[str, Grouping] = field(default_factory=dict)
    calls: list[tuple[str, object]] = field(default_factory=list)
    failing: set[str] = field(default_factory=set)
    cancel_after_lookups: tuple[int, CancellationToken] | None = None
    closed: bool = False
    _next_grouping: int = 0
    _lookups: int = 0

    def __enter__(self) -> FakeMediaServer:
        return self

    def __exit__(self, *_: object) -> None:
        self.closed = True

    # catalog

    def add(self, *items: CatalogItem) -> None:
        self.items.extend(items)

    def play(self, user_id: str, item_id: str, when: datetime) -> None:
        self.plays[(user_id, item_id)] = when

    def list_items(
        self,
        kinds: Collection[ItemKind],
        *,
        recursive: bool = True,
        ancestor_id: str | None = None,
        name: str | None = None,
    ) -> Sequence[CatalogItem]:
        self._record("list_items", (tuple(kinds), ancestor_id, name))
        if ItemKind.GROUPING in kinds:
            return [
                CatalogItem(id=grouping.id, name=grouping.name, kind=ItemKind.GROUPING)
                for grouping in self.groupings.values()
                if name is None or grouping.name == name
            ]
        return [
            item
            for item in self.items
            if item.kind in kinds
            and (ancestor_id is None or item.series_id == ancestor_id)
            and (name is None or item.name == name)
        ]

    def linked_children(self, grouping_id: str) -> Sequence[CatalogItem]:
        self._record("linked_children", grouping_id)
        by_id = {item.id: item for item in self.items}
        return [
            by_id.get(member_id) or CatalogItem(id=member_id, name=member_id, kind=ItemKind.OTHER)
            for member_id in self.groupings[grouping_id].member_ids
        ]

    # users and activity

    def list_users(self) -> Sequence[str]:
        self._record("list_users", None)
        return list(self.users)

    def get_activity(self, user_id: str, item_id: str) -> ActivityRecord | None:
        self._lookups += 1
        if self.cancel_after_lookups is not None:
            limit, token = self.cancel_after_lookups
            if self._lookups >= limit:
                token.cancel()
        if "get_activity" in self.failing:
            raise CollaboratorError("activity store unavailable")
        when = self.plays.get((user_id, item_id))
        if when is None:
            return None
        return ActivityRecord(user_id=user_id, item_id=item_id, last_played=when)

    # groupings

    def create_grouping(self, name: str, *, locked: bool) -> Grouping:
        self._record("create_grouping", (name, locked))
        self._next_grouping += 1
        grouping = Grouping(id=f"grouping-{self._next_grouping}", name=name)
        self.groupings[grouping.id] = grouping
        return grouping

    def add_members(self, grouping_id: str, item_ids: Sequence[str]) -> None:
        self._record("add_members", (grouping_id, tuple(item_ids)))
        grouping = self.groupings[grouping_id]
        members = (*grouping.member_ids, *(i for i in item_ids if i not in grouping.member_ids))
        self.groupings[grouping_id] = replace(grouping, member_ids=members)

    def remove_members(self, grouping_id: str, item_ids: Sequence[str]) -> None:
        self._record("remove_members", (grouping_id, tuple(item_ids)))
        grouping = self.groupings[grouping_id]
        members = tuple(i for i in grouping.member_ids if i not in set(item_ids))
        self.groupings[grouping_id] = replace(grouping, member_ids=members)

    # helpers

    def seed_grouping(self, name: str, member_ids: Sequence[str]) -> Grouping:
        self._next_grouping += 1
        grouping = Grouping(
            id=f"grouping-{self._next_grouping}", name=name, member_ids=tuple(member_ids)
        )
        self.groupings[grouping.id] = grouping
        return grouping

    def grouping_named(self, name: str) -> Grouping | None:
        return next((g for g in self.groupings.values() if g.name == name), None)

    def calls_to(self, operation: str) -> list[object]:
        return [args for name, args in self.calls if name == operation]

    @property
    def mutations(self) -> list[tuple[str, object]]:
        mutating = {"create_grouping", "add_members", "remove_members"}
        return [call for call in self.calls if call[0] in mutating]

    def _record(self, operation: str, args: object) -> None:
        if operation in self.failing:
            raise CollaboratorError(f"{operation} unavailable")
        self.calls.append((operation, args))
