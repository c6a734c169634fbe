"""
Countdown timer and schedulers.

The countdown is driven by a periodic callback from a scheduler, never by
a render loop, so auto-submit fires even when no UI is polling. Tests use
:class:`ManualScheduler` to advance virtual time without waiting.
"""

import asyncio
import logging
import time
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class Handle(Protocol):
    """A periodic callback registration."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Source of time and periodic callbacks."""

    def now(self) -> float: ...

    def call_every(self, interval: float, callback: Callable[[], None]) -> Handle: ...


class _AsyncioRepeatingHandle:
    """Fixed-cadence repeating call on an asyncio loop."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], None],
    ):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._next_run = loop.time() + interval
        self._cancelled = False
        self._timer_handle = loop.call_at(self._next_run, self._run)

    def _run(self) -> None:
        if self._cancelled:
            return
        # Schedule from the planned time, not the actual one, to avoid drift
        self._next_run += self._interval
        self._timer_handle = self._loop.call_at(self._next_run, self._run)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._timer_handle.cancel()


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def now(self) -> float:
        return time.monotonic()

    def call_every(
        self, interval: float, callback: Callable[[], None]
    ) -> _AsyncioRepeatingHandle:
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioRepeatingHandle(loop, interval, callback)


class _ManualJob:
    def __init__(self, interval: float, callback: Callable[[], None], next_run: float):
        self.interval = interval
        self.callback = callback
        self.next_run = next_run
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual-time scheduler. Time only moves through :meth:`advance`."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._jobs: list[_ManualJob] = []

    def now(self) -> float:
        return self._now

    def call_every(self, interval: float, callback: Callable[[], None]) -> _ManualJob:
        job = _ManualJob(interval, callback, self._now + interval)
        self._jobs.append(job)
        return job

    @property
    def pending(self) -> int:
        """Number of live (uncancelled) jobs."""
        return sum(1 for j in self._jobs if not j.cancelled)

    def advance(self, seconds: float) -> None:
        """Move time forward, firing due callbacks in time order."""
        target = self._now + seconds
        while True:
            due = [j for j in self._jobs if not j.cancelled and j.next_run <= target]
            if not due:
                break
            job = min(due, key=lambda j: j.next_run)
            self._now = job.next_run
            job.next_run += job.interval
            job.callback()
        self._jobs = [j for j in self._jobs if not j.cancelled]
        self._now = target


class CountdownTimer:
    """
    Countdown in whole seconds.

    Each tick decrements ``remaining`` and reports it to ``on_tick``. When
    it reaches zero the timer stops itself and calls ``on_expire`` once.
    """

    def __init__(self, scheduler: Scheduler, seconds: int, interval: float = 1.0):
        self._scheduler = scheduler
        self._interval = interval
        self.remaining = max(0, int(seconds))
        self._handle: Optional[Handle] = None
        self._on_tick: Optional[Callable[[int], None]] = None
        self._on_expire: Optional[Callable[[], None]] = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(
        self,
        on_tick: Optional[Callable[[int], None]] = None,
        on_expire: Optional[Callable[[], None]] = None,
    ) -> None:
        """Start or restart ticking from the current ``remaining``."""
        self.stop()
        self._on_tick = on_tick
        self._on_expire = on_expire
        if self.remaining <= 0:
            self._expire()
            return
        self._handle = self._scheduler.call_every(self._interval, self._tick)

    def stop(self) -> None:
        """Stop ticking. Safe to call repeatedly."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        if self._handle is None:
            return
        self.remaining = max(0, self.remaining - 1)
        if self._on_tick is not None:
            self._on_tick(self.remaining)
        if self.remaining == 0 and self._handle is not None:
            self._expire()

    def _expire(self) -> None:
        self.stop()
        on_expire, self._on_expire = self._on_expire, None
        logger.debug("countdown expired")
        if on_expire is not None:
            on_expire()
