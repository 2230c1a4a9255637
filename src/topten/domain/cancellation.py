"""Cooperative cancellation shared between the scheduler and a running update."""

from __future__ import annotations

import threading

from topten.domain.errors import OperationCancelledError


class CancellationToken:
    """Thread-safe flag checked between scan iterations."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError("Operation was cancelled")

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; return whether cancelled."""

        return self._event.wait(timeout)


