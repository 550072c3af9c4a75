# ABOUTME: In-memory fixed-window admission gate for asyncio tasks
# ABOUTME: Holds the asyncio lock across the wait so waiters queue in lock order

import asyncio
import time
from datetime import timedelta

from loguru import logger

from crpt_api.interfaces.rate_limiter import AbstractAsyncRateLimiter
from crpt_api.models.time_unit import TimeUnit

from .rate_limiter import Clock, Period, period_to_seconds, validate_capacity


class AsyncFixedWindowRateLimiter(AbstractAsyncRateLimiter):
    """
    Fixed-window admission gate shared by coroutines on one event loop.

    Window semantics are those of :class:`FixedWindowRateLimiter`. The wait
    happens while the lock is held, so at most one task sleeps on the window
    and every other task queues on the lock behind it. ``asyncio.Lock`` wakes
    waiters in FIFO order and a cancelled waiter leaves the queue cleanly.

    Cancelling a task inside ``acquire`` re-raises ``asyncio.CancelledError``
    to it without touching the counters.
    """

    def __init__(self, period: Period, capacity: int, clock: Clock = time.monotonic):
        """
        Initialize the gate.

        Args:
            period: Window length, as a ``timedelta`` or in seconds.
            capacity: Maximum admissions per window.
            clock: Monotonic time source in seconds.

        Raises:
            ConfigurationException: If ``capacity`` or ``period`` is not positive.
        """
        self._period = period_to_seconds(period)
        self._capacity = validate_capacity(capacity)
        self._clock = clock
        self._lock = asyncio.Lock()
        self._window_start = self._clock()
        self._count = 0
        self._logger = logger.bind(name=f"{__name__}.{type(self).__name__}")

    @classmethod
    def per(cls, time_unit: TimeUnit, capacity: int, clock: Clock = time.monotonic) -> "AsyncFixedWindowRateLimiter":
        return cls(TimeUnit(time_unit).to_timedelta(), capacity, clock=clock)

    @property
    def period(self) -> timedelta:
        return timedelta(seconds=self._period)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        return self._count

    @property
    def window_start(self) -> float:
        return self._window_start

    async def acquire(self) -> bool:
        async with self._lock:
            now = self._clock()
            if now - self._window_start > self._period:
                self._reset(now)

            if self._count >= self._capacity:
                wait_time = self._window_start + self._period - now
                if wait_time > 0:
                    self._logger.debug(f"Request limit of {self._capacity} reached, waiting {wait_time:.3f}s")
                # the event loop may wake a sleeper up to one clock tick early
                while wait_time > 0:
                    try:
                        await asyncio.sleep(wait_time)
                    except asyncio.CancelledError:
                        self._logger.info("Waiting task cancelled before admission")
                        raise
                    now = self._clock()
                    wait_time = self._window_start + self._period - now
                self._reset(now)

            self._count += 1
            return True

    def _reset(self, now: float) -> None:
        if now > self._window_start:
            self._window_start = now
        self._count = 0
        self._logger.debug(f"Rate limit window reset at {now:.3f}")
