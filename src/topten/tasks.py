"""Scheduler surface: the update exposed as a named, interval-triggered task."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from topten.config.topten import DEFAULT_REFRESH_INTERVAL_HOURS, TopTenConfig
from topten.domain.cancellation import CancellationToken
from topten.domain.errors import ConfigurationMissingError, OperationCancelledError, TopTenError
from topten.domain.update import TopTenUpdater, UpdateState

if TYPE_CHECKING:
    from topten.domain.update import ProgressSink, UpdateReport

ConfigProvider = Callable[[], TopTenConfig | None]
UpdaterFactory = Callable[[], AbstractContextManager[TopTenUpdater]]

log = getLogger(__name__)


def _log_progress(value: float) -> None:
    log.info(f"Top ten update progress: {value:.0f}%")


@dataclass(slots=True)
class TopTenCollectionTask:
    """Creates or updates the collection of the most watched movies and series."""

    name: ClassVar[str] = "Update Top Ten Collection"
    key: ClassVar[str] = "UpdateTopTenCollection"
    description: ClassVar[str] = (
        "Creates or updates a collection containing the top most watched movies "
        "and TV shows from the configured number of days."
    )
    category: ClassVar[str] = "Library"

    config_provider: ConfigProvider
    updater_factory: UpdaterFactory

    def default_interval(self) -> timedelta:
        config = self.config_provider()
        if config is None:
            return timedelta(hours=DEFAULT_REFRESH_INTERVAL_HOURS)
        return config.refresh_interval

    def execute(
        self,
        *,
        progress: ProgressSink | None = None,
        cancellation: CancellationToken | None = None,
    ) -> UpdateReport:
        """Run one update; raise when the run has to be recorded as failed."""

        config = self.config_provider()
        with self.updater_factory() as updater:
            report = updater.run(config, progress=progress, cancellation=cancellation)
        if report.state is UpdateState.ERRORED:
            if report.failures:
                raise report.failures[0]
            raise ConfigurationMissingError("Collection update aborted")
        return report


@dataclass(slots=True)
class IntervalScheduler:
    """Run a task now and then once per interval; runs never overlap."""

    task: TopTenCollectionTask
    cancellation: CancellationToken = field(default_factory=CancellationToken)

    def run_forever(
        self,
        *,
        interval: timedelta | None = None,
        max_runs: int | None = None,
    ) -> int:
        runs = 0
        while not self.cancellation.cancelled:
            effective = interval or self.task.default_interval()
            try:
                self.task.execute(progress=_log_progress, cancellation=self.cancellation)
            except OperationCancelledError:
                log.info("Scheduled update cancelled")
                break
            except TopTenError:
                log.exception(f"Scheduled task {self.task.key} failed")
            finally:
                runs += 1
            if max_runs is not None and runs >= max_runs:
                break
            log.info(f"Next top ten update in {effective}")
            if self.cancellation.wait(effective.total_seconds()):
                break
        return runs


__all__ = ["IntervalScheduler", "TopTenCollectionTask"]
