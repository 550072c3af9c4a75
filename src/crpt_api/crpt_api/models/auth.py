# ABOUTME: Wire models for the certificate authentication endpoints
# ABOUTME: Challenge, signed answer and token response of the CRPT auth flow

from pydantic import BaseModel, ConfigDict, Field


class AuthChallenge(BaseModel):
    """
    Challenge returned by ``GET /auth/cert/key``.

    The caller signs ``data`` with its qualified certificate and sends the
    signature back together with ``uuid``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    uuid: str = Field(description="Identifier of the authentication attempt")
    data: str = Field(description="Random string to be signed by the caller")


class AuthRequest(BaseModel):
    """Signed answer to an :class:`AuthChallenge`, body of ``POST /auth/cert/``."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    uuid: str
    data: str = Field(description="Base64 signature of the challenge data")


class AuthResponse(BaseModel):
    # the API reports error codes as strings or numbers
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    token: str | None = None
    code: str | None = None
    error_message: str | None = None
    description: str | None = None
