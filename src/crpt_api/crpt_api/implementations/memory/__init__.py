# ABOUTME: In-memory implementations package
# ABOUTME: Admission gates backed by process-local state only

from .rate_limiter import FixedWindowRateLimiter, SlidingWindowRateLimiter
from .async_rate_limiter import AsyncFixedWindowRateLimiter

__all__ = [
    "FixedWindowRateLimiter",
    "SlidingWindowRateLimiter",
    "AsyncFixedWindowRateLimiter",
]
