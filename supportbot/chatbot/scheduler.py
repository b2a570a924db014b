"""
Reply Scheduling
================

Cancelable deferred callbacks used to deliver agent replies after the
simulated latency. Delays are expressed in milliseconds.
"""

import asyncio
import heapq
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

from ..error_handling import ConfigurationError

logger = logging.getLogger(__name__)


class ScheduledTask(ABC):
    """Handle for a scheduled callback."""

    @abstractmethod
    def cancel(self):
        """Prevent the callback from running if it has not fired yet."""
        pass

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        pass


class Scheduler(ABC):
    """Interface for deferred callback sources."""

    @abstractmethod
    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledTask:
        """Run callback once after delay_ms milliseconds."""
        pass


class _AsyncioTask(ScheduledTask):

    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self):
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """
    Schedules callbacks on an asyncio event loop.

    The loop is bound at construction: either the one given or the loop
    running in the constructing coroutine.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                raise ConfigurationError(
                    "AsyncioScheduler needs a running event loop or an explicit loop; "
                    "use ThreadingScheduler or ManualScheduler from synchronous code"
                )
        self._loop = loop

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledTask:
        return _AsyncioTask(self._loop.call_later(delay_ms / 1000.0, callback))


class _ThreadTask(ScheduledTask):

    def __init__(self, timer: threading.Timer):
        self._timer = timer
        self._cancelled = False

    def cancel(self):
        self._cancelled = True
        self._timer.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ThreadingScheduler(Scheduler):
    """Schedules callbacks on daemon timer threads."""

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledTask:
        timer = threading.Timer(delay_ms / 1000.0, callback)
        timer.daemon = True
        timer.start()
        return _ThreadTask(timer)


class _ManualTask(ScheduledTask):

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """
    Virtual-clock scheduler.

    Nothing fires until advance() moves the clock past a task's due time,
    which makes reply delivery deterministic for tests and offline replays.
    """

    def __init__(self):
        self.now_ms = 0.0
        self._queue: List[Tuple[float, int, _ManualTask]] = []
        self._sequence = itertools.count()

    @property
    def pending(self) -> int:
        """Number of scheduled tasks that are neither fired nor cancelled."""
        return sum(1 for _, _, task in self._queue if not task.cancelled)

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledTask:
        task = _ManualTask(self.now_ms + max(0.0, delay_ms), callback)
        heapq.heappush(self._queue, (task.due, next(self._sequence), task))
        return task

    def advance(self, delay_ms: float) -> int:
        """
        Move the clock forward and fire every task that falls due.

        Returns:
            Number of callbacks run
        """
        target = self.now_ms + delay_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            self.now_ms = due
            if task.cancelled:
                continue
            task.callback()
            fired += 1
        self.now_ms = target
        return fired
