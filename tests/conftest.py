"""Test fixtures for the Mailblock SDK test suite."""

import json
import os
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest

# Set test environment variables BEFORE importing mailblock modules
os.environ.update({
    "MAILBLOCK_BASE_URL": "https://api.mailblock.test/",
    "MAILBLOCK_DEBUG": "false",
})
os.environ.pop("MAILBLOCK_API_KEY", None)
os.environ.pop("MAILBLOCK_HTTP_TIMEOUT", None)

from mailblock import Mailblock  # noqa: E402

BASE_URL = "https://api.mailblock.test"
TEST_API_KEY = "mb_test_key_123"


class FakeBackend:
    """Scripted stand-in for the Mailblock REST backend."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: Any = {"id": "x1", "status": "sent"}
        self.raw: bytes | None = None
        self.exc: Exception | None = None

    def reply(self, status_code: int = 200, body: Any = None, raw: bytes | None = None) -> None:
        self.status_code = status_code
        self.body = body
        self.raw = raw
        self.exc = None

    def fail(self, exc: Exception) -> None:
        self.exc = exc

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_json(self) -> Any:
        content = self.last_request.content
        return json.loads(content) if content else None


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def http_client(backend: FakeBackend) -> AsyncGenerator[httpx.AsyncClient, None]:
    """httpx client routed to the fake backend."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(backend)) as client:
        yield client


@pytest.fixture
def client(http_client: httpx.AsyncClient) -> Mailblock:
    """Mailblock client wired to the fake backend."""
    return Mailblock(TEST_API_KEY, http_client=http_client)


@pytest.fixture
def send_fields() -> dict[str, Any]:
    """Minimal valid send request."""
    return {
        "to": "a@b.com",
        "from_": "c@d.com",
        "subject": "Hi",
        "text": "body",
    }


@pytest.fixture
def batched_send_response() -> dict[str, Any]:
    """Send response in the batched results[] shape."""
    return {
        "results": [
            {"id": "em_1", "status": "sent", "to": "a@b.com", "cc": ["x@y.com"]},
            {"id": "em_2", "status": "sent", "to": "x@y.com"},
        ],
        "success_count": 2,
        "error_count": 0,
        "total_recipients": 2,
        "usage": {"emails_sent": 42, "limit": 1000},
    }
