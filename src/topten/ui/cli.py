from __future__ import annotations

import argparse
import logging
import sys
from datetime import timedelta
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from topten.app import build_task, update_top_ten_collection
from topten.config import configure_logging
from topten.domain.cancellation import CancellationToken
from topten.domain.errors import OperationCancelledError
from topten.tasks import IntervalScheduler

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_cancellation = CancellationToken()


def _add_config_overrides(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--collection-name",
        type=str,
        help="Name of the collection to maintain (defaults to config)",
    )
    parser.add_argument(
        "--top-count",
        type=int,
        help="Number of movies and of series to keep (defaults to config)",
    )
    parser.add_argument(
        "--days",
        type=int,
        help="Only count plays from the last N days (defaults to config)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maintain a Jellyfin top ten collection")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Update the collection once")
    _add_config_overrides(run)

    watch = subparsers.add_parser("watch", help="Update the collection on an interval")
    _add_config_overrides(watch)
    watch.add_argument(
        "--interval-hours",
        type=float,
        help="Hours between updates (defaults to the configured refresh interval)",
    )
    watch.add_argument(
        "--max-runs",
        type=int,
        help="Stop after this many updates",
    )

    return parser.parse_args(list(argv))


def _collect_overrides(args: argparse.Namespace) -> dict[str, object]:
    overrides: dict[str, object] = {}
    if args.collection_name is not None:
        if not args.collection_name.strip():
            raise ValueError("Collection name must not be blank")
        overrides["collection_name"] = args.collection_name.strip()
    if args.top_count is not None:
        if args.top_count < 0:
            raise ValueError("Top count must be non-negative")
        overrides["top_item_count"] = args.top_count
    if args.days is not None:
        if args.days < 0:
            raise ValueError("Days must be non-negative")
        overrides["days_to_consider"] = args.days
    return overrides


def _interval(args: argparse.Namespace) -> timedelta | None:
    hours = getattr(args, "interval_hours", None)
    if hours is None:
        return None
    if hours <= 0:
        raise ValueError("Interval hours must be positive")
    return timedelta(hours=hours)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        overrides = _collect_overrides(parsed_args)
        interval = _interval(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "run":
            update_top_ten_collection(overrides=overrides, cancellation=_cancellation)
        elif parsed_args.command == "watch":
            scheduler = IntervalScheduler(build_task(overrides=overrides), _cancellation)
            runs = scheduler.run_forever(interval=interval, max_runs=parsed_args.max_runs)
            log.info(f"Stopped after {runs} updates")
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except OperationCancelledError:
        log.info("Collection update cancelled")
    except Exception:
        log.exception("Fatal error during collection update")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) by cancelling the running update."""
    log.info("Cancelling (Ctrl+C)")
    _cancellation.cancel()


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
