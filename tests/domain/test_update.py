from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from topten.config import TopTenConfig
from topten.domain.cancellation import CancellationToken
from topten.domain.errors import (
    CollaboratorError,
    ConfigurationMissingError,
    ExtractionError,
    OperationCancelledError,
    ReconciliationError,
)
from topten.domain.model import CatalogItem, ItemKind, RankedSet
from topten.domain.ranking import PhaseResult, RankingRequest
from topten.domain.update import TopTenUpdater, UpdateState

from tests.support.catalog import FakeMediaServer, episode, movie, series

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from topten.domain.time_windows import Clock

NAME = "Most Watched"


@pytest.fixture
def config() -> TopTenConfig:
    return TopTenConfig(collection_name=NAME, top_item_count=2, days_to_consider=30)


@pytest.fixture
def updater(server: FakeMediaServer, clock: Clock) -> TopTenUpdater:
    return TopTenUpdater(
        catalog=server, users=server, activity=server, groupings=server, clock=clock
    )


@pytest.fixture
def library(server: FakeMediaServer, cutoff: datetime) -> FakeMediaServer:
    server.users = ["u1", "u2", "u3"]
    server.add(movie("m1"), movie("m2"), movie("m3"), series("s1"), series("s2"))
    server.add(episode("e1", "s1"), episode("e2", "s1"), episode("e3", "s2"))
    recent = cutoff + timedelta(days=5)
    for user in ("u1", "u2", "u3"):
        server.play(user, "m2", recent)
    server.play("u1", "m1", recent)
    server.play("u1", "m3", cutoff - timedelta(days=1))
    server.play("u1", "e1", recent)
    server.play("u2", "e2", recent)
    server.play("u3", "e3", recent)
    return server


def test_full_run_ranks_and_reconciles(
    updater: TopTenUpdater, library: FakeMediaServer, config: TopTenConfig
) -> None:
    progress: list[float] = []

    report = updater.run(config, progress=progress.append)

    assert report.succeeded
    assert progress == [0.0, 33.0, 66.0, 100.0]
    assert report.states == (
        UpdateState.IDLE,
        UpdateState.EXTRACTING_MOVIES,
        UpdateState.EXTRACTING_SERIES,
        UpdateState.RECONCILING,
        UpdateState.DONE,
    )
    assert report.movies is not None
    assert report.series is not None
    assert report.movies.ranked.ids == ("m2", "m1")
    assert report.series.ranked.ids == ("s1", "s2")
    grouping = library.grouping_named(NAME)
    assert grouping is not None
    assert grouping.member_ids == ("m2", "m1", "s1", "s2")
    assert report.failures == ()


def test_repeat_run_is_idempotent(
    updater: TopTenUpdater, library: FakeMediaServer, config: TopTenConfig
) -> None:
    updater.run(config)
    edits = len(library.mutations)

    report = updater.run(config)

    assert report.reconciliation is not None
    assert report.reconciliation.plan.is_noop
    assert len(library.mutations) == edits


def test_missing_configuration_aborts_without_touching_stores(
    updater: TopTenUpdater, library: FakeMediaServer
) -> None:
    progress: list[float] = []

    report = updater.run(None, progress=progress.append)

    assert report.state is UpdateState.ERRORED
    assert isinstance(report.failures[0], ConfigurationMissingError)
    assert library.calls == []
    assert library._lookups == 0  # noqa: SLF001  # type: ignore[reportPrivateUsage]
    assert max(progress) == 0


def test_movie_extraction_failure_degrades_to_series_only(
    updater: TopTenUpdater,
    library: FakeMediaServer,
    config: TopTenConfig,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    original = library.list_items

    def list_items(kinds: Collection[ItemKind], **kwargs: object) -> Sequence[CatalogItem]:
        if ItemKind.MOVIE in kinds:
            raise CollaboratorError("movies offline")
        return original(kinds, **kwargs)  # type: ignore[arg-type]

    monkeypatch.setattr(library, "list_items", list_items)

    report = updater.run(config)

    assert report.succeeded
    assert len(report.failures) == 1
    assert isinstance(report.failures[0], ExtractionError)
    grouping = library.grouping_named(NAME)
    assert grouping is not None
    assert grouping.member_ids == ("s1", "s2")


def test_user_directory_failure_degrades_both_phases(
    updater: TopTenUpdater, library: FakeMediaServer, config: TopTenConfig
) -> None:
    library.seed_grouping(NAME, ["m9"])
    library.failing.add("list_users")

    report = updater.run(config)

    assert report.succeeded
    assert [failure.kind for failure in report.failures] == ["extraction", "extraction"]
    assert [f.item_kind for f in report.failures if isinstance(f, ExtractionError)] == [
        ItemKind.MOVIE,
        ItemKind.SERIES,
    ]
    grouping = library.grouping_named(NAME)
    assert grouping is not None
    assert grouping.member_ids == ()


def test_reconciliation_failure_propagates(
    updater: TopTenUpdater, library: FakeMediaServer, config: TopTenConfig
) -> None:
    library.failing.add("create_grouping")
    progress: list[float] = []

    with pytest.raises(ReconciliationError):
        updater.run(config, progress=progress.append)

    assert progress == [0.0, 33.0, 66.0]


def test_cancellation_during_extraction_skips_reconciliation(
    updater: TopTenUpdater, library: FakeMediaServer, config: TopTenConfig
) -> None:
    token = CancellationToken()
    library.cancel_after_lookups = (1, token)

    with pytest.raises(OperationCancelledError):
        updater.run(config, cancellation=token)

    assert library.mutations == []


def test_cancellation_before_reconciliation_applies_nothing(
    server: FakeMediaServer, clock: Clock, config: TopTenConfig
) -> None:
    token = CancellationToken()

    class CancellingStrategy:
        kind = ItemKind.SERIES

        def rank(self, request: RankingRequest) -> PhaseResult:  # noqa: ARG002
            token.cancel()
            return PhaseResult(ranked=RankedSet(kind=self.kind))

    updater = TopTenUpdater(
        catalog=server,
        users=server,
        activity=server,
        groupings=server,
        clock=clock,
        series_strategy=CancellingStrategy(),
    )

    with pytest.raises(OperationCancelledError):
        updater.run(config, cancellation=token)

    assert server.mutations == []
    assert server.calls_to("linked_children") == []


def test_zero_top_count_empties_the_collection(
    updater: TopTenUpdater, library: FakeMediaServer
) -> None:
    existing = library.seed_grouping(NAME, ["m1", "s1"])

    report = updater.run(TopTenConfig(collection_name=NAME, top_item_count=0))

    assert report.succeeded
    assert library.groupings[existing.id].member_ids == ()
