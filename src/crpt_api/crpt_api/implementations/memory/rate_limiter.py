# ABOUTME: In-memory admission gates implementing AbstractRateLimiter for threads
# ABOUTME: Fixed-window gate with lazy realignment and a strict sliding-window alternative

import threading
import time
from abc import abstractmethod
from collections import deque
from datetime import timedelta
from typing import Callable, Deque, Optional, Union

from loguru import logger

from crpt_api.exceptions import AdmissionCancelledException, ConfigurationException
from crpt_api.interfaces.rate_limiter import AbstractRateLimiter
from crpt_api.models.time_unit import TimeUnit

Period = Union[timedelta, int, float]
Clock = Callable[[], float]


def period_to_seconds(period: Period) -> float:
    """
    Normalize a window period to seconds.

    Args:
        period: A ``timedelta`` or a number of seconds.

    Returns:
        The period in seconds.

    Raises:
        ConfigurationException: If the period is not a strictly positive duration.
    """
    if isinstance(period, timedelta):
        seconds = period.total_seconds()
    elif isinstance(period, (int, float)) and not isinstance(period, bool):
        seconds = float(period)
    else:
        raise ConfigurationException(
            "Rate limit period must be a timedelta or a number of seconds",
            details={"period": repr(period)},
        )
    # NaN fails this comparison too
    if not seconds > 0:
        raise ConfigurationException(
            "Rate limit period must be a positive duration",
            details={"period_seconds": seconds},
        )
    return seconds


def validate_capacity(capacity: int) -> int:
    """
    Check that a request limit is a positive integer.

    Raises:
        ConfigurationException: If ``capacity`` is not an int or is not positive.
    """
    if not isinstance(capacity, int) or isinstance(capacity, bool):
        raise ConfigurationException(
            "Request limit must be an integer",
            details={"capacity": repr(capacity)},
        )
    if capacity <= 0:
        raise ConfigurationException(
            "Request limit must be a positive number",
            details={"capacity": capacity},
        )
    return capacity


class _WindowRateLimiter(AbstractRateLimiter):
    """
    Shared blocking loop for the in-memory gates.

    Subclasses implement ``_try_admit``, which runs entirely under ``_lock``
    and either counts the caller or reports how long it should wait. The lock
    is never held while a caller sleeps; a woken caller re-validates the
    window from scratch, so waiters are admitted in no particular order.

    There is no fairness: a caller that wakes at the end of a window competes
    with callers arriving at that moment and can lose the slot to them. Under
    sustained overload the same waiter may lose every round and never be
    admitted. Pass a ``cancel_event`` with a deadline when that matters.
    """

    def __init__(self, period: Period, capacity: int, clock: Clock = time.monotonic):
        self._period = period_to_seconds(period)
        self._capacity = validate_capacity(capacity)
        self._clock = clock
        self._lock = threading.Lock()
        self._logger = logger.bind(name=f"{__name__}.{type(self).__name__}")

    @classmethod
    def per(cls, time_unit: TimeUnit, capacity: int, clock: Clock = time.monotonic):
        """Build a gate admitting ``capacity`` calls per one ``time_unit``."""
        return cls(TimeUnit(time_unit).to_timedelta(), capacity, clock=clock)

    @property
    def period(self) -> timedelta:
        return timedelta(seconds=self._period)

    @property
    def capacity(self) -> int:
        return self._capacity

    def acquire(self, cancel_event: threading.Event | None = None) -> bool:
        while True:
            if cancel_event is not None and cancel_event.is_set():
                self._raise_cancelled()

            wait_time = self._try_admit()
            if wait_time is None:
                return True

            self._logger.debug(f"Request limit of {self._capacity} reached, waiting {wait_time:.3f}s")
            if cancel_event is None:
                time.sleep(wait_time)
            elif cancel_event.wait(wait_time):
                self._raise_cancelled()

    def try_acquire(self) -> bool:
        return self._try_admit() is None

    @abstractmethod
    def _try_admit(self) -> Optional[float]:
        """
        Count the caller if the limit allows it.

        Returns:
            None if the caller was admitted, otherwise the number of seconds
            until an admission may become available.
        """
        pass

    def _raise_cancelled(self) -> None:
        self._logger.info("Waiting caller cancelled before admission")
        raise AdmissionCancelledException(
            "Cancelled while waiting for rate limit admission",
            details={"capacity": self._capacity, "period_seconds": self._period},
        )


class FixedWindowRateLimiter(_WindowRateLimiter):
    """
    Thread-safe fixed-window admission gate.

    At most ``capacity`` callers are admitted per window of length ``period``.
    The window is realigned lazily: the first caller arriving more than one
    period after ``window_start`` opens a new window starting at its own
    arrival time, and a full window whose end has passed is reset by the
    caller that finds it full.

    Because windows are fixed, a caller admitted just before a window ends
    and another admitted just after it both pass without waiting, even though
    they are closer than ``period``. Up to ``2 * capacity`` admissions can
    land inside one period-length interval straddling a boundary. Use
    :class:`SlidingWindowRateLimiter` where that burst is unacceptable.

    The window opens at construction time.

    Example:
        >>> gate = FixedWindowRateLimiter.per(TimeUnit.MINUTES, 10)
        >>> gate.acquire()
        True
    """

    def __init__(self, period: Period, capacity: int, clock: Clock = time.monotonic):
        """
        Initialize the gate.

        Args:
            period: Window length, as a ``timedelta`` or in seconds.
            capacity: Maximum admissions per window.
            clock: Monotonic time source in seconds. Injected by tests.

        Raises:
            ConfigurationException: If ``capacity`` or ``period`` is not positive.
        """
        super().__init__(period, capacity, clock)
        self._window_start = self._clock()
        self._count = 0

    @property
    def count(self) -> int:
        """Admissions granted in the current window."""
        with self._lock:
            return self._count

    @property
    def window_start(self) -> float:
        """Clock reading at which the current window began."""
        with self._lock:
            return self._window_start

    def _try_admit(self) -> Optional[float]:
        with self._lock:
            now = self._clock()
            if now - self._window_start > self._period:
                self._reset(now)

            if self._count >= self._capacity:
                wait_time = self._window_start + self._period - now
                if wait_time > 0:
                    return wait_time
                self._reset(now)

            self._count += 1
            return None

    def _reset(self, now: float) -> None:
        # Called with _lock held; the clock is monotonic so the start only moves forward.
        if now > self._window_start:
            self._window_start = now
        self._count = 0
        self._logger.debug(f"Rate limit window reset at {now:.3f}")


class SlidingWindowRateLimiter(_WindowRateLimiter):
    """
    Thread-safe sliding-window admission gate: at most ``capacity`` admissions
    within any trailing ``period``.

    Stricter than :class:`FixedWindowRateLimiter`, with no burst across window
    boundaries, at the cost of remembering one timestamp per admission.
    """

    def __init__(self, period: Period, capacity: int, clock: Clock = time.monotonic):
        super().__init__(period, capacity, clock)
        self._calls: Deque[float] = deque()

    @property
    def count(self) -> int:
        """Admissions inside the trailing period."""
        with self._lock:
            self._evict(self._clock())
            return len(self._calls)

    def _try_admit(self) -> Optional[float]:
        with self._lock:
            now = self._clock()
            self._evict(now)

            if len(self._calls) < self._capacity:
                self._calls.append(now)
                return None

            # need to wait until earliest call falls out of window
            return max(self._calls[0] + self._period - now, 0.001)

    def _evict(self, now: float) -> None:
        cutoff = now - self._period
        while self._calls and self._calls[0] <= cutoff:
            self._calls.popleft()
