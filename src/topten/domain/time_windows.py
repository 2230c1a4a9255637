"""Resolve the rolling playback window into a concrete cutoff."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """Normalise ``value`` to UTC, treating naive datetimes as UTC."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class PlaybackWindow:
    """The last ``lookback`` worth of activity, ending at the clock's now."""

    lookback: timedelta

    def __post_init__(self) -> None:
        if self.lookback < timedelta(0):
            raise ValueError("Lookback duration must be non-negative")

    @classmethod
    def of_days(cls, days: int) -> PlaybackWindow:
        return cls(lookback=timedelta(days=days))

    def cutoff(self, *, clock: Clock = utcnow) -> datetime:
        """Return the inclusive lower bound of the window in UTC."""

        return ensure_aware(clock()) - self.lookback


__all__ = ["Clock", "PlaybackWindow", "ensure_aware", "utcnow"]
