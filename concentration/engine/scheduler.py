"""
Deferred-callback schedulers for the Concentration engine.

The engine owns no wall clock. Pacing delays and the round clock are armed
through a scheduler, and every scheduled call returns a handle with a
``cancel()`` method. Three implementations are provided:

- `AsyncioScheduler`: schedules on an asyncio event loop
- `ThreadScheduler`: schedules on `threading.Timer` threads
- `ManualScheduler`: a virtual clock advanced explicitly, for tests and simulations
"""

import asyncio
import heapq
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

logger = logging.getLogger("concentration.engine.scheduler")


class Scheduler(ABC):
    """
    Interface for scheduling deferred callbacks.
    """

    @abstractmethod
    def call_later(self, delay: float, callback: Callable, *args: Any) -> Any:
        """
        Schedule ``callback(*args)`` to run after ``delay`` seconds.

        Args:
            delay: Delay in seconds
            callback: Function to call
            *args: Positional arguments for the callback

        Returns:
            A handle with a ``cancel()`` method
        """
        pass


class AsyncioScheduler(Scheduler):
    """
    Scheduler backed by an asyncio event loop.

    If no loop is given, the running loop at the time of each call is used.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable, *args: Any):
        return self.loop.call_later(delay, callback, *args)


class ThreadScheduler(Scheduler):
    """
    Scheduler backed by daemon `threading.Timer` threads.

    Callbacks run on timer threads, so the engine serializes them with its own lock.
    """

    def call_later(self, delay: float, callback: Callable, *args: Any):
        timer = threading.Timer(delay, callback, args=args)
        timer.daemon = True
        timer.start()
        return timer


class ScheduledCall:
    """
    Handle for a callback queued on a `ManualScheduler`.
    """

    def __init__(self, when: float, callback: Callable, args: tuple):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "pending"
        name = getattr(self.callback, "__name__", repr(self.callback))
        return f"ScheduledCall({name}, when={self.when}, {state})"


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler driven by a virtual clock.

    Nothing runs until `advance` or `run_all` is called. Callbacks due at the
    same time run in the order they were scheduled, and callbacks scheduled
    while advancing run in the same pass if they fall due within it.

    >>> scheduler = ManualScheduler()
    >>> calls = []
    >>> _ = scheduler.call_later(1.0, calls.append, "a")
    >>> scheduler.advance(0.5)
    0
    >>> scheduler.advance(0.5)
    1
    >>> calls
    ['a']
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[tuple] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable, *args: Any) -> ScheduledCall:
        call = ScheduledCall(self.now + max(delay, 0.0), callback, args)
        heapq.heappush(self._queue, (call.when, next(self._counter), call))
        return call

    @property
    def pending(self) -> int:
        """Number of scheduled calls that have not run and are not cancelled."""
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def advance(self, seconds: float) -> int:
        """
        Move the virtual clock forward, running every callback that falls due.

        Args:
            seconds: Amount of virtual time to advance

        Returns:
            Number of callbacks run
        """
        if seconds < 0:
            raise ValueError("Cannot advance the clock backwards")

        target = self.now + seconds
        ran = 0

        while self._queue and self._queue[0][0] <= target:
            when, _, call = heapq.heappop(self._queue)
            self.now = when
            if call.cancelled:
                continue
            call.callback(*call.args)
            ran += 1

        self.now = target
        return ran

    def run_all(self, limit: int = 10_000) -> int:
        """
        Run pending callbacks in time order until the queue is empty.

        Args:
            limit: Maximum number of callbacks to run, guarding against
                   callbacks that keep rescheduling themselves

        Returns:
            Number of callbacks run
        """
        ran = 0
        while self._queue and ran < limit:
            when, _, call = heapq.heappop(self._queue)
            self.now = max(self.now, when)
            if call.cancelled:
                continue
            call.callback(*call.args)
            ran += 1

        if self._queue and ran >= limit:
            logger.warning(f"Stopped after {limit} callbacks with work still queued")
        return ran
