"""Order tallied items by a two-key comparator and keep the top N."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from topten.domain.model import PlaybackTally

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from topten.domain.model import CatalogItem, ItemId

type SortKey = Callable[[PlaybackTally], tuple[int, int]]


def by_unique_users(tally: PlaybackTally) -> tuple[int, int]:
    return tally.unique_user_count, tally.play_count


def by_play_count(tally: PlaybackTally) -> tuple[int, int]:
    return tally.play_count, tally.unique_user_count


def rank_items(
    items: Iterable[CatalogItem],
    tallies: Mapping[ItemId, PlaybackTally],
    *,
    key: SortKey,
    limit: int,
) -> tuple[CatalogItem, ...]:
    """Return at most ``limit`` items, best first.

    Items are ordered by ``key`` descending (primary, then secondary). Items with
    a zero primary key or without a tally are dropped, repeated ids keep their
    first occurrence, and full ties keep the order in which ``items`` were given.
    """

    if limit < 0:
        raise ValueError("Top item count must be non-negative")
    if limit == 0:
        return ()

    seen: set[ItemId] = set()
    candidates: list[CatalogItem] = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        tally = tallies.get(item.id)
        if tally is None or key(tally)[0] <= 0:
            continue
        candidates.append(item)

    # sorted() is stable with reverse=True, so enumeration order breaks full ties.
    ordered = sorted(candidates, key=lambda item: key(tallies[item.id]), reverse=True)
    return tuple(ordered[:limit])


__all__ = ["SortKey", "by_play_count", "by_unique_users", "rank_items"]
