# ABOUTME: Package initialization for the CRPT API client
# ABOUTME: Exposes the client, the admission gates and the exception hierarchy

"""
CRPT API client package.

This package provides a synchronous client for the CRPT document API together
with the admission gates that keep outbound traffic under a configured rate.
The gates are usable on their own: every request-issuing code path calls
``acquire()`` once before it touches the network.
"""

from crpt_api.client import CrptApiClient
from crpt_api.exceptions import (
    CrptApiException,
    ConfigurationException,
    AdmissionCancelledException,
    ExternalServiceException,
    ApiErrorException,
    AuthenticationException,
    SerializationException,
)
from crpt_api.implementations.memory import (
    FixedWindowRateLimiter,
    SlidingWindowRateLimiter,
    AsyncFixedWindowRateLimiter,
)
from crpt_api.implementations.noop import NoOpRateLimiter
from crpt_api.models import TimeUnit

__version__ = "0.1.0"

__all__ = [
    "CrptApiClient",
    "CrptApiException",
    "ConfigurationException",
    "AdmissionCancelledException",
    "ExternalServiceException",
    "ApiErrorException",
    "AuthenticationException",
    "SerializationException",
    "FixedWindowRateLimiter",
    "SlidingWindowRateLimiter",
    "AsyncFixedWindowRateLimiter",
    "NoOpRateLimiter",
    "TimeUnit",
]
