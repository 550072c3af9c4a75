# ABOUTME: Wire models for the document creation endpoint
# ABOUTME: Builds the base64 document envelope and interprets the creation response

import base64
import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from crpt_api.exceptions import SerializationException

DEFAULT_DOCUMENT_FORMAT = "MANUAL"
DEFAULT_PRODUCT_GROUP = "clothes"
DEFAULT_DOCUMENT_TYPE = "LP_INTRODUCE_GOODS"

DocumentPayload = Mapping[str, Any] | BaseModel


def encode_document(document: DocumentPayload) -> str:
    """
    Serialize a business document to compact JSON and base64 encode it.

    Pydantic models are dumped by alias and plain mappings are serialized
    exactly as given. In both cases ``None`` values stay in the document as
    JSON ``null``; only the outer request drops empty fields.

    Args:
        document: The document to encode.

    Returns:
        The base64 text of the UTF-8 JSON.

    Raises:
        SerializationException: If the document is not JSON serializable.
    """
    try:
        if isinstance(document, BaseModel):
            payload: Any = document.model_dump(mode="json", by_alias=True)
        elif isinstance(document, Mapping):
            payload = dict(document)
        else:
            raise TypeError(f"unsupported document type {type(document).__name__}")
        raw = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise SerializationException(
            "Failed to serialize document",
            details={"document_type": type(document).__name__, "error": str(e)},
        ) from e
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


class DocumentRequest(BaseModel):
    """
    Body of ``POST /lk/documents/create``.

    The business document travels base64 encoded in ``product_document`` and is
    signed by the caller; the client never inspects its schema.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid", str_strip_whitespace=True)

    document_format: str = Field(default=DEFAULT_DOCUMENT_FORMAT)
    product_document: str = Field(min_length=1, description="Base64 encoded document JSON")
    product_group: str = Field(default=DEFAULT_PRODUCT_GROUP)
    signature: str = Field(min_length=1, description="Detached signature of the document in base64")
    type: str = Field(default=DEFAULT_DOCUMENT_TYPE)

    @classmethod
    def from_document(
        cls,
        document: DocumentPayload,
        signature: str,
        product_group: str | None = None,
    ) -> "DocumentRequest":
        """
        Build a creation request for an introduce-goods document.

        Args:
            document: The business document, as a mapping or a pydantic model.
            signature: The caller's signature of the document.
            product_group: Product group code. Defaults to ``clothes``.

        Returns:
            A request ready to be sent.
        """
        return cls(
            product_document=encode_document(document),
            product_group=product_group or DEFAULT_PRODUCT_GROUP,
            signature=signature,
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class DocumentResponse(BaseModel):
    """Response of the document creation endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    value: str | None = Field(default=None, description="Identifier of the created document")
    code: str | None = None
    error_message: str | None = None
    description: str | None = None

    @property
    def is_success(self) -> bool:
        return bool(self.value)
