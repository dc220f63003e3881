"""Shared fixtures: a fake Sentry API behind httpx.MockTransport."""

import json
from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest

from sentry_mcp.config import Settings
from sentry_mcp.sentry_client import RetryPolicy, SentryClient
from sentry_mcp.server import build_service

BASE_URL = "https://sentry.example.com/api/0/"


class FakeSentry:
    """Routes requests by path; each route may hold a queue of responses."""

    def __init__(self) -> None:
        self.routes: Dict[str, List[Any]] = {}
        self.requests: List[httpx.Request] = []
        self.sleeps: List[float] = []

    def add(self, path: str, *responses: Any) -> None:
        self.routes.setdefault("/api/0/" + path, []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get(request.url.path)
        if not queue:
            return httpx.Response(404, json={"detail": "The requested resource does not exist"})
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, content=json.dumps(item).encode(), headers={"Content-Type": "application/json"})

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        sentry_base_url=BASE_URL,
        sentry_auth_token="test-token-1234",
        sentry_org_slug="acme",
    )


@pytest.fixture
def fake_sentry():
    return FakeSentry()


@pytest.fixture
def client(fake_sentry):
    return SentryClient(
        base_url=BASE_URL,
        auth_token="test-token-1234",
        retry_policy=RetryPolicy(max_retries=3, backoff_seconds=1.0),
        transport=httpx.MockTransport(fake_sentry.handler),
        sleep=fake_sentry.sleep,
    )


@pytest.fixture
def service(settings, client):
    return build_service(settings, client=client)


def release(version: str, date: str, new_groups: int = 0) -> Dict[str, Any]:
    return {"version": version, "dateCreated": date, "newGroups": new_groups}


def decode(result) -> Tuple[Any, bool]:
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    return json.loads(result.content[0].text), result.is_error
