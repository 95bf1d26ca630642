import httpx
from pydantic import ValidationError

from core.exceptions import RecipientNotFoundError, UpstreamError
from core.logging import get_logger
from models.upload_request import UploadRequest
from models.upload_result import PersonSearchResponse
from services.loxo_api import auth_headers, people_search_url

logger = get_logger(__name__)


class RecipientResolver:
    """
    Finds the Loxo person id an upload is addressed to.

    Requests that already carry a person id are returned as-is; otherwise the
    person is looked up by email through the Loxo people search.
    """

    def __init__(self, api_host: str):
        self.api_host = api_host

    def resolve(self, client: httpx.Client, request: UploadRequest, token: str) -> int:
        if request.person_id is not None:
            return request.person_id
        return self.find_person_id(client, request.agency_slug, request.recipient_email, token)

    def find_person_id(self, client: httpx.Client, agency_slug: str, email: str, token: str) -> int:
        url = people_search_url(self.api_host, agency_slug, email)

        try:
            response = client.get(url, headers=auth_headers(token))
        except httpx.HTTPError as e:
            logger.error(f"Failed to get person with email {email}: {e}")
            raise UpstreamError("resolve", f"Person lookup failed: {e}")

        if not response.is_success:
            logger.error(f"Failed to get person with email {email}. HTTP status code: {response.status_code}")
            raise UpstreamError(
                "resolve",
                f"Person lookup failed with status {response.status_code}.",
                upstream_status=response.status_code
            )

        try:
            result = PersonSearchResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Unreadable person search response for {email}: {e}")
            raise UpstreamError("resolve", "Person lookup returned an unreadable response.")

        if not result.people:
            logger.warning(f"No person found with email {email} in agency {agency_slug}")
            raise RecipientNotFoundError(agency_slug)

        person_id = result.people[0].id
        logger.info(f"Resolved email {email} to person {person_id}")
        return person_id
