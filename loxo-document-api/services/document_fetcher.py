import posixpath
from datetime import datetime
from typing import Callable
from urllib.parse import unquote, urlsplit

import httpx

from core.exceptions import UpstreamError
from core.logging import get_logger
from core.settings import FilenamePolicy
from models.upload_result import FetchedDocument

logger = get_logger(__name__)


def timestamp_filename(timestamp_format: str, now: datetime) -> str:
    return now.strftime(timestamp_format)


def url_path_filename(url: str) -> str:
    """Last segment of the URL path, percent-decoded; empty when there is none"""
    path = unquote(urlsplit(url).path)
    return posixpath.basename(path)


class DocumentFetcher:
    """Downloads the document from the caller-supplied URL"""

    def __init__(
        self,
        filename_policy: FilenamePolicy = FilenamePolicy.TIMESTAMP,
        timestamp_format: str = "Form_%Y_%m_%d_%H_%M_%S.pdf",
        clock: Callable[[], datetime] = datetime.now
    ):
        self.filename_policy = filename_policy
        self.timestamp_format = timestamp_format
        self.clock = clock

    def fetch(self, client: httpx.Client, url: str) -> FetchedDocument:
        # The URL is expected to be public or pre-signed, so no auth headers are sent
        try:
            response = client.get(url, follow_redirects=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Failed to download file {url}: {e}")
            raise UpstreamError("fetch", f"Document download failed: {e}")

        if not response.is_success:
            logger.error(f"Failed to download file {url}. HTTP status code: {response.status_code}")
            raise UpstreamError(
                "fetch",
                f"Document download failed with status {response.status_code}.",
                upstream_status=response.status_code
            )

        content = response.content
        logger.info(f"File downloaded successfully. Size: {len(content)} bytes")
        return FetchedDocument(content=content, filename=self.filename_for(url))

    def filename_for(self, url: str) -> str:
        if self.filename_policy == FilenamePolicy.URL_PATH:
            filename = url_path_filename(url)
            if filename:
                return filename
        return timestamp_filename(self.timestamp_format, self.clock())
