# ABOUTME: Main configuration composition for the CRPT API client
# ABOUTME: Adds API endpoint, rate limit and HTTP settings on top of the base settings

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, field_validator

from crpt_api.models.time_unit import TimeUnit

from ._base import BaseCrptSettings


class CrptSettings(BaseCrptSettings):
    """Represents the complete configuration of the client.

    The request limit is expressed the way the API operator publishes it:
    ``CRPT_REQUEST_LIMIT`` requests per one ``CRPT_TIME_UNIT``. These values
    are read once at startup and handed to the admission gate; the gate never
    reads configuration on its own.

    Attributes:
        CRPT_BASE_URL: Root URL of the API, without a trailing slash.
        CRPT_REQUEST_LIMIT: Maximum number of requests per time unit.
        CRPT_TIME_UNIT: Time unit the request limit applies to.
        CRPT_HTTP_TIMEOUT: Timeout in seconds for a single HTTP request.
        CRPT_USER_AGENT: User-Agent header sent with every request.
        CRPT_PRODUCT_GROUP: Default product group of created documents.
    """

    CRPT_BASE_URL: str = Field(
        default="https://ismp.crpt.ru/api/v3",
        description="Root URL of the CRPT API.",
    )
    CRPT_REQUEST_LIMIT: int = Field(
        default=10,
        gt=0,
        description="Maximum number of requests allowed per time unit.",
    )
    CRPT_TIME_UNIT: TimeUnit = Field(
        default=TimeUnit.MINUTES,
        description="Time unit the request limit applies to.",
    )
    CRPT_HTTP_TIMEOUT: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for a single HTTP request.",
    )
    CRPT_USER_AGENT: str = Field(default="CrptApi/1.0")
    CRPT_PRODUCT_GROUP: str = Field(default="clothes", min_length=1)

    @field_validator("CRPT_BASE_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    @field_validator("CRPT_TIME_UNIT", mode="before")
    @classmethod
    def validate_time_unit_case_insensitive(cls, v: str) -> str:
        """Accept time units in any case, e.g. ``MINUTES`` or ``Minutes``."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @property
    def rate_limit_period(self) -> timedelta:
        """Length of one rate limiting window."""
        return self.CRPT_TIME_UNIT.to_timedelta()


@lru_cache
def get_settings() -> CrptSettings:
    """Provides a cached instance of the client settings.

    The environment and `.env` file are read only on the first call.

    Returns:
        A single, cached instance of the CrptSettings class.
    """
    return CrptSettings()
