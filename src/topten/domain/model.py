"""Catalog entities and per-run playback aggregates."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from topten.domain.time_windows import ensure_aware

if TYPE_CHECKING:
    from datetime import datetime

type ItemId = str
type UserId = str


class ItemKind(StrEnum):
    MOVIE = "Movie"
    SERIES = "Series"
    EPISODE = "Episode"
    GROUPING = "Grouping"
    OTHER = "Other"


@dataclass(frozen=True, slots=True, kw_only=True)
class CatalogItem:
    """Read-only view of an item owned by the external catalog.

    ``series_id`` is only set for episodes and references the owning series.
    """

    id: ItemId
    name: str
    kind: ItemKind
    series_id: ItemId | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ActivityRecord:
    user_id: UserId
    item_id: ItemId
    last_played: datetime | None = None

    def played_since(self, cutoff: datetime) -> bool:
        """Return whether the last play falls inside the window starting at ``cutoff``.

        The boundary is inclusive. Naive timestamps are read as UTC.
        """

        if self.last_played is None:
            return False
        return ensure_aware(self.last_played) >= ensure_aware(cutoff)


@dataclass(frozen=True, slots=True, kw_only=True)
class PlaybackTally:
    """Playback aggregate of one ranked item, rebuilt from scratch on every run.

    The activity store only keeps one last-played timestamp per user and item, so
    ``play_count`` counts users with a recent play rather than individual plays.
    For movies it is therefore always equal to ``unique_user_count``; for series it
    counts recent (episode, user) pairs.
    """

    id: ItemId
    name: str
    play_count: int = 0
    unique_user_count: int = 0


@dataclass(frozen=True, slots=True, kw_only=True)
class Grouping:
    """A named collection in the external catalog.

    Only ``member_ids`` is ever edited; identity and name are fixed at creation.
    """

    id: ItemId
    name: str
    member_ids: tuple[ItemId, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class RankedSet:
    """Ordered top-N output of a ranking strategy for one item kind."""

    kind: ItemKind
    items: tuple[CatalogItem, ...] = ()
    tallies: dict[ItemId, PlaybackTally] = field(default_factory=dict[ItemId, PlaybackTally])

    def __len__(self) -> int:
        return len(self.items)

    @property
    def ids(self) -> tuple[ItemId, ...]:
        return tuple(item.id for item in self.items)


def merge_ranked_sets(*ranked_sets: RankedSet) -> tuple[CatalogItem, ...]:
    """Concatenate ranked sets in order, keeping the first occurrence of each id."""

    seen: set[ItemId] = set()
    merged: list[CatalogItem] = []
    for ranked in ranked_sets:
        for item in ranked.items:
            if item.id in seen:
                continue
            seen.add(item.id)
            merged.append(item)
    return tuple(merged)


__all__ = [
    "ActivityRecord",
    "CatalogItem",
    "Grouping",
    "ItemId",
    "ItemKind",
    "PlaybackTally",
    "RankedSet",
    "UserId",
    "merge_ranked_sets",
]
