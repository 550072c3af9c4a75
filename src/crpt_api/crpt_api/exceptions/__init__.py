# ABOUTME: Exceptions package exports
# ABOUTME: Exports the client's exception hierarchy

from crpt_api.exceptions.base import (
    CrptApiException,
    ConfigurationException,
    AdmissionCancelledException,
    ExternalServiceException,
    ApiErrorException,
    AuthenticationException,
    SerializationException,
)

__all__ = [
    "CrptApiException",
    "ConfigurationException",
    "AdmissionCancelledException",
    "ExternalServiceException",
    "ApiErrorException",
    "AuthenticationException",
    "SerializationException",
]
