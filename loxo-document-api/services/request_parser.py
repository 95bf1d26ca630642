import json
from typing import Mapping, Optional

import httpx
from pydantic import ValidationError

from core.exceptions import RequestValidationError
from core.logging import get_logger
from core.settings import RecipientStrategy
from models.upload_request import InboundPayload, UploadRequest

logger = get_logger(__name__)

PERSON_ID_QUERY_PARAM = "person-id"


class RequestParser:
    """
    Turns the raw inbound body and query parameters into an UploadRequest.

    Missing fields are reported in a fixed order: fileUrl, then the recipient
    field of the configured strategy, then slug.
    """

    def __init__(self, strategy: RecipientStrategy, default_slug: Optional[str] = None):
        self.strategy = strategy
        self.default_slug = default_slug

    def parse(self, body: Optional[bytes], params: Optional[Mapping[str, str]] = None) -> UploadRequest:
        payload = self.parse_body(body)
        data = payload.data
        params = params or {}

        if not payload.fileUrl:
            raise RequestValidationError("fileUrl")
        if not self.is_fetchable_url(payload.fileUrl):
            raise RequestValidationError("fileUrl", "Invalid fileUrl in request body.")

        person_id = None
        email = None
        slug = data.slug if data else None

        if self.strategy == RecipientStrategy.EMAIL:
            email = data.email if data else None
            if not email:
                raise RequestValidationError("email")
        elif self.strategy == RecipientStrategy.PERSON_ID:
            person_id = data.personID if data else None
            if person_id is None:
                raise RequestValidationError("personID")
        else:
            person_id = UploadRequest.parse_person_id(params.get(PERSON_ID_QUERY_PARAM))
            if person_id is None:
                raise RequestValidationError(
                    PERSON_ID_QUERY_PARAM,
                    f"Missing {PERSON_ID_QUERY_PARAM} in query parameters."
                )
            slug = self.default_slug

        if not slug:
            raise RequestValidationError("slug")

        return UploadRequest(
            document_url=payload.fileUrl,
            agency_slug=slug,
            person_id=person_id,
            recipient_email=email
        )

    @staticmethod
    def is_fetchable_url(value: str) -> bool:
        """Absolute http(s) URL with a host that httpx can send"""
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL:
            return False
        return url.scheme in ("http", "https") and bool(url.host)

    @staticmethod
    def parse_body(body: Optional[bytes]) -> InboundPayload:
        """Parse the JSON body, treating anything unreadable as an empty payload"""
        if not body:
            return InboundPayload()

        try:
            return InboundPayload.model_validate(json.loads(body))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Unreadable request body, treating all fields as missing: {e}")
            return InboundPayload()
