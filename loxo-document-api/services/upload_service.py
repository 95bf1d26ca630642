from typing import Mapping, Optional

import httpx

from core.exceptions import (
    LoxoUploadError,
    RequestValidationError,
    UpstreamError,
)
from core.logging import get_logger
from core.settings import ErrorStatusPolicy, Settings, get_settings
from models.upload_result import HandlerResponse
from services.credentials import CredentialProvider, build_credential_provider
from services.document_fetcher import DocumentFetcher
from services.document_publisher import DocumentPublisher
from services.recipient_resolver import RecipientResolver
from services.request_parser import RequestParser

logger = get_logger(__name__)

# Statuses answered under the normalized error policy, per failing stage
NORMALIZED_STAGE_STATUS = {
    "resolve": 404,
    "fetch": 404,
    "publish": 500,
}


class UploadDocumentService:
    """
    Copies a document from a URL to a Loxo person record.

    One call to handle() runs the whole pipeline: validate the request, resolve
    the agency token and person id, download the document and post it to Loxo.
    Any failure stops the pipeline and is turned into a HandlerResponse.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        credentials: Optional[CredentialProvider] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.settings = settings or get_settings()
        self.credentials = credentials or build_credential_provider(self.settings)
        self.transport = transport

        self.parser = RequestParser(self.settings.RECIPIENT_STRATEGY, self.settings.LOXO_AGENCY_SLUG)
        self.resolver = RecipientResolver(self.settings.LOXO_API_HOST)
        self.fetcher = DocumentFetcher(
            filename_policy=self.settings.FILENAME_POLICY,
            timestamp_format=self.settings.FILENAME_TIMESTAMP_FORMAT
        )
        self.publisher = DocumentPublisher(self.settings.LOXO_API_HOST)

    def handle(self, body: Optional[bytes], params: Optional[Mapping[str, str]] = None) -> HandlerResponse:
        try:
            return self._run(body, params)
        except RequestValidationError as e:
            logger.warning(f"Rejected upload request: {e.message}")
            return HandlerResponse(status_code=e.status_code, message=e.message)
        except UpstreamError as e:
            return HandlerResponse(status_code=self.status_for(e), message=e.message)
        except LoxoUploadError as e:
            logger.error(f"Upload failed: {e.message}")
            return HandlerResponse(status_code=e.status_code, message=e.message)

    def _run(self, body: Optional[bytes], params: Optional[Mapping[str, str]]) -> HandlerResponse:
        request = self.parser.parse(body, params)
        token = self.credentials.get_token(request.agency_slug)

        with httpx.Client(transport=self.transport) as client:
            person_id = self.resolver.resolve(client, request, token)
            document = self.fetcher.fetch(client, request.document_url)
            outcome = self.publisher.publish(client, request.agency_slug, person_id, document, token)

        if not outcome.success:
            raise UpstreamError(
                "publish",
                "Failed to post file to Loxo.",
                upstream_status=outcome.status_code
            )

        return HandlerResponse(status_code=200, message="File posted successfully.")

    def status_for(self, error: UpstreamError) -> int:
        if self.settings.ERROR_STATUS_POLICY == ErrorStatusPolicy.VERBATIM:
            return error.status_code
        return NORMALIZED_STAGE_STATUS.get(error.stage, 500)
