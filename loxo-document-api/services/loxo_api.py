from typing import Dict
from urllib.parse import quote, quote_plus


def agency_url(api_host: str, agency_slug: str, path: str) -> str:
    return f"https://{api_host}/api/{quote(agency_slug, safe='')}/{path.lstrip('/')}"


def people_search_url(api_host: str, agency_slug: str, email: str) -> str:
    return agency_url(api_host, agency_slug, f'people?query=emails:"{quote_plus(email.strip())}"')


def person_documents_url(api_host: str, agency_slug: str, person_id: int) -> str:
    return agency_url(api_host, agency_slug, f"people/{person_id}/documents")


def auth_headers(token: str) -> Dict[str, str]:
    return {
        "Accept": "application/json",
        "Authorization": f"Bearer {token}",
    }
