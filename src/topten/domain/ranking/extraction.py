"""Turn per-user activity records into playback tallies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from topten.domain.cancellation import CancellationToken
from topten.domain.model import PlaybackTally

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from topten.domain.model import CatalogItem, UserId
    from topten.domain.ports import ActivityStore


@dataclass(slots=True)
class PlaybackSignalExtractor:
    """Read-only scan of the activity store for one cutoff."""

    activity: ActivityStore
    cutoff: datetime
    cancellation: CancellationToken = field(default_factory=CancellationToken)

    def recent_users(self, item: CatalogItem, users: Iterable[UserId]) -> list[UserId]:
        """Users whose last play of ``item`` is at or after the cutoff."""

        recent: list[UserId] = []
        for user_id in users:
            self.cancellation.raise_if_cancelled()
            record = self.activity.get_activity(user_id, item.id)
            if record is not None and record.played_since(self.cutoff):
                recent.append(user_id)
        return recent

    def tally_item(self, item: CatalogItem, users: Sequence[UserId]) -> PlaybackTally:
        # One timestamp per (user, item) means play count and unique users coincide.
        count = len(self.recent_users(item, users))
        return PlaybackTally(id=item.id, name=item.name, play_count=count, unique_user_count=count)

    def tally_series(
        self,
        series: CatalogItem,
        episodes: Iterable[CatalogItem],
        users: Sequence[UserId],
    ) -> PlaybackTally:
        play_count = 0
        unique_users: set[UserId] = set()
        for episode in episodes:
            self.cancellation.raise_if_cancelled()
            recent = self.recent_users(episode, users)
            play_count += len(recent)
            unique_users.update(recent)
        return PlaybackTally(
            id=series.id,
            name=series.name,
            play_count=play_count,
            unique_user_count=len(unique_users),
        )


__all__ = ["PlaybackSignalExtractor"]
