# ABOUTME: NoOp implementations package
# ABOUTME: Pass-through components for tests and local development

from .rate_limiter import NoOpRateLimiter

__all__ = [
    "NoOpRateLimiter",
]
