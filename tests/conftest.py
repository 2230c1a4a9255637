from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from tests.support.catalog import FakeMediaServer

if TYPE_CHECKING:
    from topten.domain.time_windows import Clock

NOW = datetime(2025, 6, 30, 12, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> Clock:
    def _clock() -> datetime:
        return NOW

    return _clock


@pytest.fixture
def cutoff() -> datetime:
    return NOW - timedelta(days=30)


@pytest.fixture
def server() -> FakeMediaServer:
    return FakeMediaServer()


@pytest.fixture(autouse=True)
def _clean_topten_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TOPTEN_COLLECTION_NAME",
        "TOPTEN_TOP_ITEM_COUNT",
        "TOPTEN_REFRESH_INTERVAL_HOURS",
        "TOPTEN_DAYS_TO_CONSIDER",
        "TOPTEN_HTTP_CACHE",
        "TOPTEN_DATA_DIR",
        "JELLYFIN_URL",
        "JELLYFIN_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
