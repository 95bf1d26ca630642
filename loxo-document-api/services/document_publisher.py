import httpx

from core.logging import get_logger
from models.upload_result import FetchedDocument, PublishOutcome
from services.loxo_api import auth_headers, person_documents_url

logger = get_logger(__name__)

DOCUMENT_FIELD = "document"
DOCUMENT_CONTENT_TYPE = "application/octet-stream"


class DocumentPublisher:
    """
    Uploads a fetched document to a Loxo person record.

    Each successful call creates a new document upstream; calling twice
    creates a duplicate.
    """

    def __init__(self, api_host: str):
        self.api_host = api_host

    def publish(
        self,
        client: httpx.Client,
        agency_slug: str,
        person_id: int,
        document: FetchedDocument,
        token: str
    ) -> PublishOutcome:
        url = person_documents_url(self.api_host, agency_slug, person_id)
        files = {DOCUMENT_FIELD: (document.filename, document.content, DOCUMENT_CONTENT_TYPE)}

        try:
            response = client.post(url, files=files, headers=auth_headers(token))
        except httpx.HTTPError as e:
            logger.error(f"Failed to post file to person {person_id}: {e}")
            return PublishOutcome(success=False)

        if not response.is_success:
            logger.error(f"Failed to post file. HTTP status code: {response.status_code}")
            return PublishOutcome(success=False, status_code=response.status_code)

        logger.info(f"File posted successfully to person {person_id} as {document.filename}")
        return PublishOutcome(success=True, status_code=response.status_code)
