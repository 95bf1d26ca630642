"""
Pytest configuration and fixtures for the test suite.

All outbound HTTP is served by FakeUpstream through httpx.MockTransport, so
tests can assert exactly which calls the pipeline made.
"""

import json
from typing import Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

from core.settings import Settings

LOXO_HOST = "app.loxo.co"
DOCUMENT_URL = "https://host/doc.pdf"

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (full pipeline)")
    config.addinivalue_line("markers", "api: API endpoint tests")


# =============================================================================
# Fake upstream
# =============================================================================

class FakeUpstream:
    """Routes requests by (method, host, path) and records every call"""

    def __init__(self):
        self.routes: Dict[Tuple[str, str, str], Responder] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, url: str, responder: Responder) -> "FakeUpstream":
        parsed = httpx.URL(url)
        self.routes[(method.upper(), parsed.host, parsed.path)] = responder
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.host, request.url.path))
        if responder is None:
            return httpx.Response(501, text=f"No fake route for {request.method} {request.url}")
        if callable(responder):
            return responder(request)
        return responder

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=self.transport)

    def calls(self, method: str, path_suffix: str = "") -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and r.url.path.endswith(path_suffix)
        ]

    @property
    def publish_calls(self) -> List[httpx.Request]:
        return self.calls("POST", "/documents")


def multipart_parts(request: httpx.Request) -> Dict[str, Tuple[Dict[str, str], bytes]]:
    """Split a multipart/form-data request into {field name: (headers, payload)}"""
    content_type = request.headers["Content-Type"]
    boundary = content_type.split("boundary=", 1)[1].strip('"').encode()

    parts = {}
    for chunk in request.content.split(b"--" + boundary)[1:-1]:
        head, _, payload = chunk[2:].partition(b"\r\n\r\n")
        headers = {}
        for line in head.decode().split("\r\n"):
            key, _, value = line.partition(":")
            headers[key.strip().lower()] = value.strip()
        name = headers["content-disposition"].split('name="', 1)[1].split('"', 1)[0]
        parts[name] = (headers, payload[:-2])
    return parts


def json_body(payload: Optional[dict]) -> bytes:
    return json.dumps(payload).encode()


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build Settings from keyword overrides, ignoring the process environment defaults."""
    def _make(**overrides) -> Settings:
        values = {
            "LOXO_API_HOST": LOXO_HOST,
            "LOXO_TOKENS": {"acme": "token-acme"},
        }
        values.update(overrides)
        return Settings(**values)
    return _make


@pytest.fixture
def email_body() -> bytes:
    return json_body({"fileUrl": DOCUMENT_URL, "data": {"slug": "acme", "email": "a@b.com"}})
