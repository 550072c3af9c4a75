# ABOUTME: Implementations package exports
# ABOUTME: Contains concrete admission gates

from .memory import FixedWindowRateLimiter, SlidingWindowRateLimiter, AsyncFixedWindowRateLimiter
from .noop import NoOpRateLimiter

__all__ = [
    "FixedWindowRateLimiter",
    "SlidingWindowRateLimiter",
    "AsyncFixedWindowRateLimiter",
    "NoOpRateLimiter",
]
