"""Ports onto the media server that owns items, users, activity and collections.

Implementations signal an unreachable or failing store by raising
``topten.domain.errors.CollaboratorError``; the core never inspects any other
exception type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from topten.domain.model import (
        ActivityRecord,
        CatalogItem,
        Grouping,
        ItemId,
        ItemKind,
        UserId,
    )


@runtime_checkable
class CatalogService(Protocol):
    """Enumerates catalog items and their ancestry."""

    def list_items(
        self,
        kinds: Collection[ItemKind],
        *,
        recursive: bool = True,
        ancestor_id: ItemId | None = None,
        name: str | None = None,
    ) -> Sequence[CatalogItem]: ...

    def linked_children(self, grouping_id: ItemId) -> Sequence[CatalogItem]: ...


@runtime_checkable
class UserDirectory(Protocol):
    def list_users(self) -> Sequence[UserId]: ...


@runtime_checkable
class ActivityStore(Protocol):
    """Per user and item last-played lookups."""

    def get_activity(self, user_id: UserId, item_id: ItemId) -> ActivityRecord | None: ...


@runtime_checkable
class GroupingStore(Protocol):
    def create_grouping(self, name: str, *, locked: bool) -> Grouping: ...

    def add_members(self, grouping_id: ItemId, item_ids: Sequence[ItemId]) -> None: ...

    def remove_members(self, grouping_id: ItemId, item_ids: Sequence[ItemId]) -> None: ...


__all__ = ["ActivityStore", "CatalogService", "GroupingStore", "UserDirectory"]
