# ABOUTME: Synchronous client for the CRPT document API
# ABOUTME: Routes every outbound request through an admission gate before sending it

import threading
from typing import Any, Dict, Optional

import requests
from loguru import logger

from crpt_api.config.settings import CrptSettings, get_settings
from crpt_api.exceptions import (
    ApiErrorException,
    AuthenticationException,
    ExternalServiceException,
    SerializationException,
)
from crpt_api.implementations.memory.rate_limiter import FixedWindowRateLimiter, validate_capacity
from crpt_api.interfaces.rate_limiter import AbstractRateLimiter
from crpt_api.models.auth import AuthChallenge, AuthRequest, AuthResponse
from crpt_api.models.document import (
    DEFAULT_PRODUCT_GROUP,
    DocumentPayload,
    DocumentRequest,
    DocumentResponse,
)
from crpt_api.models.time_unit import TimeUnit

DEFAULT_BASE_URL = "https://ismp.crpt.ru/api/v3"
CREATE_DOCUMENT_PATH = "/lk/documents/create"
AUTH_REQUEST_PATH = "/auth/cert/key"
AUTH_CONFIRM_PATH = "/auth/cert/"


class CrptApiClient:
    """
    Thread-safe client for the CRPT (GIS MT) API with request rate limiting.

    Every public call takes exactly one admission from the client's gate
    before it builds and sends its request. Over the limit, calls block until
    the next window opens. A call whose ``cancel_event`` fires while waiting
    raises :class:`AdmissionCancelledException` and sends nothing.

    Failed requests still used their admission: the gate has no view of what
    happens on the wire.

    Example:
        >>> with CrptApiClient(TimeUnit.MINUTES, 10) as api:
        ...     challenge = api.request_auth_challenge()
        ...     token = api.authenticate(challenge.uuid, sign(challenge.data))
        ...     doc_id = api.create_document(document, sign(document), token)
    """

    def __init__(
        self,
        time_unit: TimeUnit,
        request_limit: int,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        user_agent: str = "CrptApi/1.0",
        product_group: str = DEFAULT_PRODUCT_GROUP,
        session: Optional[requests.Session] = None,
        rate_limiter: Optional[AbstractRateLimiter] = None,
    ):
        """
        Initialize the client.

        Args:
            time_unit: Time unit the request limit applies to.
            request_limit: Maximum requests per ``time_unit``.
            base_url: Root URL of the API.
            timeout: Timeout in seconds for each HTTP request.
            user_agent: User-Agent header value.
            product_group: Default product group for created documents.
            session: HTTP session to use. A new one is created and owned if None.
            rate_limiter: Gate to use instead of a fixed-window gate built
                from ``time_unit`` and ``request_limit``.

        Raises:
            ConfigurationException: If ``request_limit`` is not positive.
        """
        validate_capacity(request_limit)
        self.time_unit = TimeUnit(time_unit)
        self.request_limit = request_limit
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.product_group = product_group
        self.rate_limiter = rate_limiter or FixedWindowRateLimiter.per(self.time_unit, request_limit)

        self._owns_session = session is None
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})
        self._logger = logger.bind(name=f"{__name__}.{type(self).__name__}")

    @classmethod
    def from_settings(cls, settings: Optional[CrptSettings] = None, **kwargs: Any) -> "CrptApiClient":
        """Build a client from ``CrptSettings``, by default the cached environment settings."""
        settings = settings or get_settings()
        return cls(
            settings.CRPT_TIME_UNIT,
            settings.CRPT_REQUEST_LIMIT,
            base_url=settings.CRPT_BASE_URL,
            timeout=settings.CRPT_HTTP_TIMEOUT,
            user_agent=settings.CRPT_USER_AGENT,
            product_group=settings.CRPT_PRODUCT_GROUP,
            **kwargs,
        )

    def create_document(
        self,
        document: DocumentPayload,
        signature: str,
        token: str,
        *,
        product_group: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """
        Create an introduce-goods document for goods produced in the RF.

        Args:
            document: The business document, as a mapping or pydantic model.
            signature: Signature of the document (base64).
            token: Bearer token obtained from :meth:`authenticate`.
            product_group: Product group code, defaults to the client's.
            cancel_event: Set to abandon the wait for admission.

        Returns:
            The identifier of the created document.

        Raises:
            AdmissionCancelledException: If cancelled before admission.
            ApiErrorException: If the API accepted the request but reported an error.
            ExternalServiceException: On transport failure or non-200 status.
            SerializationException: If the document or the response cannot be (de)serialized.
        """
        self.rate_limiter.acquire(cancel_event)

        request = DocumentRequest.from_document(document, signature, product_group or self.product_group)
        response = self._send(
            "POST",
            CREATE_DOCUMENT_PATH,
            json=request.to_payload(),
            headers={"Authorization": f"Bearer {token}"},
        )
        if response.status_code != 200:
            raise ExternalServiceException(
                f"Document creation failed with HTTP {response.status_code}",
                details=self._failure_details(response),
            )

        result = self._parse(DocumentResponse, response)
        if not result.is_success:
            raise ApiErrorException(
                f"API error: {result.error_message or result.description or 'no document id returned'}",
                code=result.code,
                details={
                    "url": response.url,
                    "error_message": result.error_message,
                    "description": result.description,
                },
            )
        self._logger.info(f"Document {result.value} created")
        return result.value

    def request_auth_challenge(self, *, cancel_event: Optional[threading.Event] = None) -> AuthChallenge:
        """
        Request the data to sign for certificate authentication.

        Returns:
            The challenge carrying ``uuid`` and ``data``.

        Raises:
            AdmissionCancelledException: If cancelled before admission.
            ExternalServiceException: On transport failure or non-200 status.
            SerializationException: If the response is not a valid challenge.
        """
        self.rate_limiter.acquire(cancel_event)

        response = self._send("GET", AUTH_REQUEST_PATH)
        if response.status_code != 200:
            raise ExternalServiceException(
                f"Authentication challenge request failed with HTTP {response.status_code}",
                details=self._failure_details(response),
            )
        return self._parse(AuthChallenge, response)

    def authenticate(
        self,
        uuid: str,
        signed_data: str,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """
        Exchange a signed challenge for an authentication token.

        Args:
            uuid: ``uuid`` from :meth:`request_auth_challenge`.
            signed_data: The challenge data signed by the caller (base64).
            cancel_event: Set to abandon the wait for admission.

        Returns:
            The bearer token.

        Raises:
            AdmissionCancelledException: If cancelled before admission.
            AuthenticationException: If the API refuses the signature or returns no token.
            ExternalServiceException: On transport failure.
        """
        self.rate_limiter.acquire(cancel_event)

        body = AuthRequest(uuid=uuid, data=signed_data).model_dump(by_alias=True)
        response = self._send("POST", AUTH_CONFIRM_PATH, json=body)
        if response.status_code != 200:
            raise AuthenticationException(
                f"Authentication failed with HTTP {response.status_code}",
                details=self._failure_details(response),
            )

        result = self._parse(AuthResponse, response)
        if not result.token:
            raise AuthenticationException(
                f"Authentication returned no token: {result.error_message or result.description or 'empty response'}",
                code=result.code,
                details={"url": response.url},
            )
        return result.token

    def close(self) -> None:
        """Release the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "CrptApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = self.base_url + path
        self._logger.debug(f"{method} {url}")
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            self._logger.error(f"{method} {url} failed: {e}")
            raise ExternalServiceException(
                f"HTTP request failed: {method} {url}",
                details={"url": url, "error": str(e)},
            ) from e

    def _json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise SerializationException(
                "Response body is not valid JSON",
                details={"url": response.url, "body": response.text[:500]},
            ) from e

    def _parse(self, model, response: requests.Response):
        data = self._json(response)
        try:
            return model.model_validate(data)
        except ValueError as e:
            raise SerializationException(
                f"Unexpected response shape for {model.__name__}",
                details={"url": response.url, "error": str(e)},
            ) from e

    @staticmethod
    def _failure_details(response: requests.Response) -> Dict[str, Any]:
        return {"url": response.url, "status_code": response.status_code, "body": response.text[:500]}
