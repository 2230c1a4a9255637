"""Top ten collection settings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import env_int, env_str
from .errors import ConfigurationError

DEFAULT_COLLECTION_NAME = "Jellyfin Top Ten"
DEFAULT_TOP_ITEM_COUNT = 10
DEFAULT_REFRESH_INTERVAL_HOURS = 24
DEFAULT_DAYS_TO_CONSIDER = 30


@dataclass(frozen=True, slots=True)
class TopTenConfig:
    """Settings for one collection update run.

    Passed explicitly into every run; nothing reads these from process-wide state.
    """

    collection_name: str = DEFAULT_COLLECTION_NAME
    top_item_count: int = DEFAULT_TOP_ITEM_COUNT
    refresh_interval_hours: int = DEFAULT_REFRESH_INTERVAL_HOURS
    days_to_consider: int = DEFAULT_DAYS_TO_CONSIDER

    def __post_init__(self) -> None:
        if not self.collection_name.strip():
            raise ConfigurationError("Collection name must not be blank")
        if self.top_item_count < 0:
            raise ConfigurationError("Top item count must be non-negative")
        if self.refresh_interval_hours <= 0:
            raise ConfigurationError("Refresh interval must be at least one hour")
        if self.days_to_consider < 0:
            raise ConfigurationError("Days to consider must be non-negative")

    @property
    def lookback(self) -> timedelta:
        return timedelta(days=self.days_to_consider)

    @property
    def refresh_interval(self) -> timedelta:
        return timedelta(hours=self.refresh_interval_hours)


def get_topten_config() -> TopTenConfig:
    return TopTenConfig(
        collection_name=env_str("TOPTEN_COLLECTION_NAME", DEFAULT_COLLECTION_NAME),
        top_item_count=env_int("TOPTEN_TOP_ITEM_COUNT", DEFAULT_TOP_ITEM_COUNT),
        refresh_interval_hours=env_int(
            "TOPTEN_REFRESH_INTERVAL_HOURS", DEFAULT_REFRESH_INTERVAL_HOURS
        ),
        days_to_consider=env_int("TOPTEN_DAYS_TO_CONSIDER", DEFAULT_DAYS_TO_CONSIDER),
    )
