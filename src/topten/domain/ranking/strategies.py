"""Ranking strategies for the item kinds that make up the collection.

Movies rank by how many distinct users watched them recently; series rank by
how many recent (episode, user) plays they accumulated. Both report failures of
the underlying stores as a ``PhaseResult`` rather than raising, so the caller
can decide per phase whether to carry on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from topten.domain.cancellation import CancellationToken
from topten.domain.errors import CollaboratorError, ExtractionError
from topten.domain.model import ItemKind, RankedSet

from .extraction import PlaybackSignalExtractor
from .ranker import by_play_count, by_unique_users, rank_items

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from topten.domain.model import ItemId, PlaybackTally, UserId
    from topten.domain.ports import ActivityStore, CatalogService

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class RankingRequest:
    users: Sequence[UserId]
    cutoff: datetime
    limit: int
    cancellation: CancellationToken = field(default_factory=CancellationToken)


@dataclass(slots=True)
class PhaseResult:
    """Outcome of one extraction phase: a ranking, or the failure that replaced it."""

    ranked: RankedSet
    failure: ExtractionError | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def failed(cls, kind: ItemKind, failure: ExtractionError) -> PhaseResult:
        return cls(ranked=RankedSet(kind=kind), failure=failure)


class RankingStrategy(Protocol):
    """Extract tallies for one item kind, rank them and return the top N."""

    kind: ItemKind

    def rank(self, request: RankingRequest) -> PhaseResult: ...


@dataclass(slots=True)
class MovieRankingStrategy:
    catalog: CatalogService
    activity: ActivityStore
    kind: ItemKind = ItemKind.MOVIE

    def rank(self, request: RankingRequest) -> PhaseResult:
        log.info(
            f"Finding top {request.limit} movies since {request.cutoff:%Y-%m-%d} "
            f"across {len(request.users)} users"
        )
        extractor = PlaybackSignalExtractor(self.activity, request.cutoff, request.cancellation)
        try:
            movies = self.catalog.list_items((ItemKind.MOVIE,), recursive=True)
            tallies: dict[ItemId, PlaybackTally] = {
                movie.id: extractor.tally_item(movie, request.users) for movie in movies
            }
        except CollaboratorError as exc:
            return _extraction_failed(self.kind, exc)

        items = rank_items(movies, tallies, key=by_unique_users, limit=request.limit)
        log.info(f"Ranked {len(items)} of {len(movies)} movies")
        return PhaseResult(ranked=RankedSet(kind=self.kind, items=items, tallies=tallies))


@dataclass(slots=True)
class SeriesRankingStrategy:
    catalog: CatalogService
    activity: ActivityStore
    kind: ItemKind = ItemKind.SERIES

    def rank(self, request: RankingRequest) -> PhaseResult:
        log.info(
            f"Finding top {request.limit} series since {request.cutoff:%Y-%m-%d} "
            f"across {len(request.users)} users"
        )
        extractor = PlaybackSignalExtractor(self.activity, request.cutoff, request.cancellation)
        tallies: dict[ItemId, PlaybackTally] = {}
        episode_count = 0
        try:
            all_series = self.catalog.list_items((ItemKind.SERIES,), recursive=True)
            for series in all_series:
                request.cancellation.raise_if_cancelled()
                episodes = self.catalog.list_items(
                    (ItemKind.EPISODE,), recursive=True, ancestor_id=series.id
                )
                episode_count += len(episodes)
                tallies[series.id] = extractor.tally_series(series, episodes, request.users)
        except CollaboratorError as exc:
            return _extraction_failed(self.kind, exc)

        items = rank_items(all_series, tallies, key=by_play_count, limit=request.limit)
        log.info(
            f"Ranked {len(items)} of {len(all_series)} series ({episode_count} episodes scanned)"
        )
        return PhaseResult(ranked=RankedSet(kind=self.kind, items=items, tallies=tallies))


def _extraction_failed(kind: ItemKind, exc: CollaboratorError) -> PhaseResult:
    log.error(f"Error getting top {kind.value.lower()} items: {exc}")
    failure = ExtractionError(f"{kind.value} extraction failed: {exc}", item_kind=kind)
    failure.__cause__ = exc
    return PhaseResult.failed(kind, failure)


__all__ = [
    "MovieRankingStrategy",
    "PhaseResult",
    "RankingRequest",
    "RankingStrategy",
    "SeriesRankingStrategy",
]
