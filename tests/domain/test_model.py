from __future__ import annotations

from datetime import UTC, datetime, timedelta

from topten.domain.model import ActivityRecord, ItemKind, RankedSet, merge_ranked_sets

from tests.support.catalog import movie, series

CUTOFF = datetime(2025, 6, 1, tzinfo=UTC)


def test_activity_exactly_at_cutoff_is_inside_window() -> None:
    record = ActivityRecord(user_id="u1", item_id="m1", last_played=CUTOFF)

    assert record.played_since(CUTOFF)


def test_activity_before_cutoff_is_outside_window() -> None:
    record = ActivityRecord(
        user_id="u1", item_id="m1", last_played=CUTOFF - timedelta(microseconds=1)
    )

    assert not record.played_since(CUTOFF)


def test_naive_activity_timestamp_is_read_as_utc() -> None:
    naive = CUTOFF.replace(tzinfo=None)
    inside = ActivityRecord(user_id="u1", item_id="m1", last_played=naive)
    outside = ActivityRecord(
        user_id="u1", item_id="m1", last_played=naive - timedelta(microseconds=1)
    )

    assert inside.played_since(CUTOFF)
    assert not outside.played_since(CUTOFF)


def test_activity_without_timestamp_is_outside_window() -> None:
    record = ActivityRecord(user_id="u1", item_id="m1")

    assert not record.played_since(CUTOFF)


def test_merge_ranked_sets_keeps_movies_before_series_and_drops_repeats() -> None:
    movies = RankedSet(kind=ItemKind.MOVIE, items=(movie("a"), movie("b")))
    shows = RankedSet(kind=ItemKind.SERIES, items=(series("c"), movie("a"), series("d")))

    merged = merge_ranked_sets(movies, shows)

    assert [item.id for item in merged] == ["a", "b", "c", "d"]


def test_merge_ranked_sets_of_empty_sets_is_empty() -> None:
    assert merge_ranked_sets(RankedSet(kind=ItemKind.MOVIE), RankedSet(kind=ItemKind.SERIES)) == ()
