"""Run one top ten collection update: rank movies, rank series, reconcile."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from topten.domain.cancellation import CancellationToken
from topten.domain.errors import (
    CollaboratorError,
    ConfigurationMissingError,
    ExtractionError,
    OperationCancelledError,
    TopTenError,
)
from topten.domain.model import merge_ranked_sets
from topten.domain.ranking import (
    MovieRankingStrategy,
    PhaseResult,
    RankingRequest,
    SeriesRankingStrategy,
)
from topten.domain.reconciliation import GroupingReconciler
from topten.domain.time_windows import PlaybackWindow, utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from topten.config import TopTenConfig
    from topten.domain.model import UserId
    from topten.domain.ports import ActivityStore, CatalogService, GroupingStore, UserDirectory
    from topten.domain.ranking import RankingStrategy
    from topten.domain.reconciliation import ReconcileResult
    from topten.domain.time_windows import Clock

ProgressSink = Callable[[float], None]

log = getLogger(__name__)


class UpdateState(StrEnum):
    IDLE = "idle"
    EXTRACTING_MOVIES = "extracting_movies"
    EXTRACTING_SERIES = "extracting_series"
    RECONCILING = "reconciling"
    DONE = "done"
    ERRORED = "errored"


_PROGRESS: dict[UpdateState, float] = {
    UpdateState.IDLE: 0.0,
    UpdateState.EXTRACTING_MOVIES: 0.0,
    UpdateState.EXTRACTING_SERIES: 33.0,
    UpdateState.RECONCILING: 66.0,
    UpdateState.DONE: 100.0,
}


def _ignore_progress(_value: float) -> None:
    return None


@dataclass(slots=True)
class _RunTracker:
    """Moves through the update states and reports monotonic progress."""

    sink: ProgressSink
    state: UpdateState = UpdateState.IDLE
    history: list[UpdateState] = field(default_factory=list["UpdateState"])
    reported: float = -1.0

    def advance(self, state: UpdateState) -> None:
        self.state = state
        self.history.append(state)
        value = _PROGRESS.get(state)
        if value is not None and value > self.reported:
            self.reported = value
            self.sink(value)

    def fail(self) -> None:
        self.state = UpdateState.ERRORED
        self.history.append(UpdateState.ERRORED)


@dataclass(slots=True)
class UpdateReport:
    """Summary of a finished (or configuration-aborted) run."""

    state: UpdateState
    states: tuple[UpdateState, ...] = ()
    cutoff: datetime | None = None
    movies: PhaseResult | None = None
    series: PhaseResult | None = None
    reconciliation: ReconcileResult | None = None
    failures: tuple[TopTenError, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.state is UpdateState.DONE


@dataclass(slots=True)
class TopTenUpdater:
    """Sequence extraction, ranking and reconciliation for a single run.

    Extraction failures degrade that kind to an empty ranking; configuration
    absence aborts before touching any store; reconciliation failures and
    cancellation propagate to the caller.
    """

    catalog: CatalogService
    users: UserDirectory
    activity: ActivityStore
    groupings: GroupingStore
    clock: Clock = utcnow
    movie_strategy: RankingStrategy | None = None
    series_strategy: RankingStrategy | None = None

    def run(
        self,
        config: TopTenConfig | None,
        *,
        progress: ProgressSink | None = None,
        cancellation: CancellationToken | None = None,
    ) -> UpdateReport:
        token = cancellation or CancellationToken()
        tracker = _RunTracker(sink=progress or _ignore_progress)
        log.info("Starting top ten collection update")
        tracker.advance(UpdateState.IDLE)

        if config is None:
            log.error("Configuration is missing, skipping collection update")
            tracker.fail()
            return UpdateReport(
                state=tracker.state,
                states=tuple(tracker.history),
                failures=(ConfigurationMissingError("Configuration is missing"),),
            )

        try:
            return self._run(config, tracker=tracker, cancellation=token)
        except OperationCancelledError:
            phase = tracker.state
            tracker.fail()
            log.warning(f"Collection update cancelled during {phase}")
            raise
        except Exception:
            tracker.fail()
            log.exception("Error updating top ten collection")
            raise

    def _run(
        self,
        config: TopTenConfig,
        *,
        tracker: _RunTracker,
        cancellation: CancellationToken,
    ) -> UpdateReport:
        cutoff = PlaybackWindow.of_days(config.days_to_consider).cutoff(clock=self.clock)
        tracker.advance(UpdateState.EXTRACTING_MOVIES)
        users, users_failure = self._list_users()

        movie_strategy = self.movie_strategy or MovieRankingStrategy(self.catalog, self.activity)
        series_strategy = self.series_strategy or SeriesRankingStrategy(
            self.catalog, self.activity
        )
        request = RankingRequest(
            users=users,
            cutoff=cutoff,
            limit=config.top_item_count,
            cancellation=cancellation,
        )

        movies = self._run_phase(movie_strategy, request, users_failure)
        tracker.advance(UpdateState.EXTRACTING_SERIES)

        series = self._run_phase(series_strategy, request, users_failure)
        tracker.advance(UpdateState.RECONCILING)

        cancellation.raise_if_cancelled()
        desired = merge_ranked_sets(movies.ranked, series.ranked)
        reconciler = GroupingReconciler(catalog=self.catalog, groupings=self.groupings)
        reconciliation = reconciler.reconcile(config.collection_name, desired)
        tracker.advance(UpdateState.DONE)

        failures = tuple(phase.failure for phase in (movies, series) if phase.failure)
        log.info(
            f"Top ten collection update completed: movies={len(movies.ranked)}, "
            f"series={len(series.ranked)}, added={reconciliation.added}, "
            f"removed={reconciliation.removed}, degraded_phases={len(failures)}"
        )
        return UpdateReport(
            state=tracker.state,
            states=tuple(tracker.history),
            cutoff=cutoff,
            movies=movies,
            series=series,
            reconciliation=reconciliation,
            failures=failures,
        )

    def _list_users(self) -> tuple[tuple[UserId, ...], CollaboratorError | None]:
        try:
            return tuple(self.users.list_users()), None
        except CollaboratorError as exc:
            log.error(f"Error listing users: {exc}")
            return (), exc

    def _run_phase(
        self,
        strategy: RankingStrategy,
        request: RankingRequest,
        users_failure: CollaboratorError | None,
    ) -> PhaseResult:
        if users_failure is not None:
            failure = ExtractionError(
                f"{strategy.kind.value} extraction failed: {users_failure}",
                item_kind=strategy.kind,
            )
            failure.__cause__ = users_failure
            return PhaseResult.failed(strategy.kind, failure)
        result = strategy.rank(request)
        if result.failure is not None:
            log.warning(
                f"Continuing with an empty {strategy.kind.value.lower()} ranking: {result.failure}"
            )
        return result


__all__ = ["ProgressSink", "TopTenUpdater", "UpdateReport", "UpdateState"]
