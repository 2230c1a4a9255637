from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from topten.domain.time_windows import Clock, PlaybackWindow, ensure_aware


def _make_clock(reference: datetime) -> Clock:
    def _clock() -> datetime:
        return reference

    return _clock


def test_cutoff_subtracts_days_from_now() -> None:
    now = datetime(2025, 1, 31, 12, tzinfo=UTC)

    cutoff = PlaybackWindow.of_days(30).cutoff(clock=_make_clock(now))

    assert cutoff == datetime(2025, 1, 1, 12, tzinfo=UTC)


def test_zero_day_window_cuts_off_at_now() -> None:
    now = datetime(2025, 1, 31, 12, tzinfo=UTC)

    assert PlaybackWindow.of_days(0).cutoff(clock=_make_clock(now)) == now


def test_cutoff_is_normalised_to_utc() -> None:
    now = datetime(2025, 1, 31, 14, tzinfo=timezone(timedelta(hours=2)))

    cutoff = PlaybackWindow(lookback=timedelta(hours=1)).cutoff(clock=_make_clock(now))

    assert cutoff == datetime(2025, 1, 31, 11, tzinfo=UTC)
    assert cutoff.tzinfo is UTC


def test_window_rejects_negative_lookback() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        PlaybackWindow(lookback=timedelta(days=-1))


def test_ensure_aware_treats_naive_values_as_utc() -> None:
    naive = datetime(2025, 1, 1, 8)  # noqa: DTZ001

    assert ensure_aware(naive) == datetime(2025, 1, 1, 8, tzinfo=UTC)
