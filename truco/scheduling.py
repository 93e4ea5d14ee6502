"""Deferred callbacks used to pace the engine between rounds."""

from __future__ import annotations

import threading
from typing import Callable, Protocol


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask: ...


class ThreadingScheduler:
    """Run callbacks on daemon ``threading.Timer`` threads."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class _RanTask:
    def cancel(self) -> None:
        return None


class ImmediateScheduler:
    """Run callbacks synchronously, ignoring the delay. Handy for batch simulations."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        callback()
        return _RanTask()
