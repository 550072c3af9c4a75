# ABOUTME: Core exception classes for the CRPT API client
# ABOUTME: Provides structured error handling with context and error codes

from typing import Dict, Any


class CrptApiException(Exception):
    """Base exception class for the CRPT API client.

    Provides structured error handling with optional error codes and contextual
    details. Every exception raised by this package inherits from this class so
    callers can catch client failures in one place.

    Attributes:
        message: Human-readable error message
        code: Optional error code for programmatic handling
        details: Optional dictionary containing contextual information
    """

    def __init__(self, message: str, code: str | None = None, details: Dict[str, Any] | None = None):
        """Initialize CrptApiException with message, optional code and details.

        Args:
            message: Human-readable error message
            code: Optional error code for programmatic handling
            details: Optional dictionary containing contextual information
        """
        self.message = message
        self.code = code
        self.details = details.copy() if details else {}
        super().__init__(self.message)


class ConfigurationException(CrptApiException):
    """Exception raised for configuration errors.

    Used when a component is constructed with values it cannot work with, such as:
    - Non-positive request limit
    - Non-positive rate limiting period
    - Unsupported time unit

    These errors are not retryable. Should include the offending values in details.
    """

    def __init__(self, message: str, code: str | None = "INVALID_CONFIG", details: Dict[str, Any] | None = None):
        super().__init__(message, code, details)


class AdmissionCancelledException(CrptApiException):
    """Exception raised when a caller abandons its wait at an admission gate.

    The gate's counters are left untouched when this is raised: the cancelled
    caller did not consume an admission. The request it guarded must not be
    sent. Retrying is the caller's decision.
    """

    def __init__(self, message: str, code: str | None = "CANCELLED", details: Dict[str, Any] | None = None):
        super().__init__(message, code, details)


class ExternalServiceException(CrptApiException):
    """Exception raised for failures of the remote API.

    Used when the CRPT API cannot be reached or answers unsuccessfully, such as:
    - Connection errors and network timeouts
    - Non-success HTTP status codes

    Should include the URL and, where available, the status code and response body.
    """

    pass


class ApiErrorException(ExternalServiceException):
    """Exception raised when the API answers with success status but an error body.

    The CRPT API reports some business errors with HTTP 200 and an
    ``error_message`` field instead of a result value.
    """

    pass


class AuthenticationException(CrptApiException):
    """Exception raised for authentication errors.

    Used when the certificate authentication endpoints refuse the signed
    challenge or return no token.
    """

    pass


class SerializationException(CrptApiException):
    """Exception raised when a payload cannot be encoded or decoded.

    Used when a document cannot be serialized to JSON, or when a response body
    is not the JSON the endpoint promises.
    """

    pass
