# ABOUTME: NoOp implementation of AbstractRateLimiter that always admits
# ABOUTME: Provides a pass-through gate for testing and local development

import threading

from crpt_api.exceptions import AdmissionCancelledException
from crpt_api.interfaces.rate_limiter import AbstractRateLimiter


class NoOpRateLimiter(AbstractRateLimiter):
    """
    No-operation implementation of AbstractRateLimiter.

    Admits every caller immediately and keeps no window state, only a running
    total of admissions. A caller whose cancel event is already set is still
    refused, so code written against a real gate behaves the same when this
    one is swapped in.

    Use Cases:
    - Testing environments where rate limiting should be bypassed
    - Local development against a mock server
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._admitted = 0

    @property
    def admitted(self) -> int:
        """Total admissions granted since construction."""
        with self._lock:
            return self._admitted

    def acquire(self, cancel_event: threading.Event | None = None) -> bool:
        """
        Admit the caller immediately.

        Args:
            cancel_event: Checked once; a set event raises instead of admitting.

        Returns:
            True (always admits unless cancelled)
        """
        if cancel_event is not None and cancel_event.is_set():
            raise AdmissionCancelledException("Cancelled before rate limit admission")
        return self.try_acquire()

    def try_acquire(self) -> bool:
        with self._lock:
            self._admitted += 1
        return True
