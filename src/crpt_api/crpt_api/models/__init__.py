# ABOUTME: Models package exports
# ABOUTME: Exports the time unit enum and the API wire models

from crpt_api.models.time_unit import TimeUnit
from crpt_api.models.auth import AuthChallenge, AuthRequest, AuthResponse
from crpt_api.models.document import (
    DocumentPayload,
    DocumentRequest,
    DocumentResponse,
    encode_document,
)

__all__ = [
    "TimeUnit",
    "AuthChallenge",
    "AuthRequest",
    "AuthResponse",
    "DocumentPayload",
    "DocumentRequest",
    "DocumentResponse",
    "encode_document",
]
