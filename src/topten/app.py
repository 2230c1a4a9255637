"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from topten.adapters.jellyfin import JellyfinGateway
from topten.config import ConfigurationError, TopTenConfig, get_topten_config
from topten.domain.update import TopTenUpdater
from topten.tasks import TopTenCollectionTask

if TYPE_CHECKING:
    from topten.domain.cancellation import CancellationToken
    from topten.domain.update import ProgressSink, UpdateReport

GatewayFactory = Callable[[], JellyfinGateway]

log = getLogger(__name__)


def load_topten_config(overrides: Mapping[str, object] | None = None) -> TopTenConfig | None:
    """Read settings from the environment, applying CLI ``overrides``.

    Invalid settings are logged and reported as absent so the run aborts cleanly.
    """

    try:
        config = get_topten_config()
        if overrides:
            config = replace(config, **overrides)  # type: ignore[arg-type]
    except ConfigurationError:
        log.exception("Invalid top ten configuration")
        return None
    return config


@contextmanager
def open_updater(gateway_factory: GatewayFactory = JellyfinGateway) -> Iterator[TopTenUpdater]:
    """Yield an updater over a fresh gateway and close the gateway after the run."""

    with gateway_factory() as gateway:
        yield TopTenUpdater(catalog=gateway, users=gateway, activity=gateway, groupings=gateway)


def build_task(
    *,
    overrides: Mapping[str, object] | None = None,
    gateway_factory: GatewayFactory = JellyfinGateway,
) -> TopTenCollectionTask:
    return TopTenCollectionTask(
        config_provider=lambda: load_topten_config(overrides),
        updater_factory=lambda: open_updater(gateway_factory),
    )


def update_top_ten_collection(
    *,
    overrides: Mapping[str, object] | None = None,
    gateway_factory: GatewayFactory = JellyfinGateway,
    progress: ProgressSink | None = None,
    cancellation: CancellationToken | None = None,
) -> UpdateReport:
    """Run a single collection update against the configured Jellyfin server."""

    task = build_task(overrides=overrides, gateway_factory=gateway_factory)
    report = task.execute(progress=progress, cancellation=cancellation)
    reconciliation = report.reconciliation
    log.info(
        f"Finished top ten update: state={report.state}, "
        f"added={reconciliation.added if reconciliation else 0}, "
        f"removed={reconciliation.removed if reconciliation else 0}"
    )
    return report
