# ABOUTME: Abstract admission gate interfaces for keeping outbound calls under a rate
# ABOUTME: Defines the blocking (thread) and asyncio contracts every gate implements

import threading
from abc import ABC, abstractmethod


class AbstractRateLimiter(ABC):
    """
    Abstract base class for blocking admission gates.

    An admission gate sits between "a caller wants to issue a request" and
    "the request is sent". Every request-issuing operation calls ``acquire``
    exactly once before performing its network I/O. Callers over the limit are
    delayed, never rejected: the only backpressure signal is time.

    Admissions are consumed per window and never returned, so there is no
    release operation. This models a rate limiter, not a concurrency limiter.

    Implementations must be safe to call from any number of threads at once.
    """

    @abstractmethod
    def acquire(self, cancel_event: threading.Event | None = None) -> bool:
        """
        Block the calling thread until an admission is granted.

        Args:
            cancel_event: Optional event the caller sets to abandon the wait.
                The gate only reads it; it is never cleared, so the caller's
                cancellation state stays observable after the call.

        Returns:
            bool: True once the caller has been counted toward the current window.

        Raises:
            AdmissionCancelledException: If ``cancel_event`` is set before the
                caller is admitted. No admission is consumed in that case.
        """
        pass

    @abstractmethod
    def try_acquire(self) -> bool:
        """
        Take an admission only if one is available right now.

        Never blocks. Useful for callers that prefer to skip work over waiting.

        Returns:
            bool: True if the caller was admitted, False if it would have to wait.
        """
        pass


class AbstractAsyncRateLimiter(ABC):
    """
    Abstract base class for admission gates shared by asyncio tasks.

    Same contract as :class:`AbstractRateLimiter`, with task cancellation as
    the cancellation channel: a task cancelled while waiting sees
    ``asyncio.CancelledError`` propagate out of ``acquire`` unchanged.
    """

    @abstractmethod
    async def acquire(self) -> bool:
        """
        Suspend the calling task until an admission is granted.

        Returns:
            bool: True once the caller has been counted toward the current window.

        Raises:
            asyncio.CancelledError: If the task is cancelled while waiting. No
                admission is consumed in that case.
        """
        pass
