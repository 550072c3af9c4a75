# ABOUTME: Interfaces package exports
# ABOUTME: Exports the abstract admission gate contracts

from .rate_limiter import AbstractRateLimiter, AbstractAsyncRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "AbstractAsyncRateLimiter",
]
