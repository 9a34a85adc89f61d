"""Shared fixtures for proxy tests."""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config


class RecordingLogger:
    """RequestLogger that keeps every call for assertions."""

    def __init__(self) -> None:
        self.proxied: list[dict[str, Any]] = []
        self.rejected: list[tuple[str, int, str]] = []
        self.home: list[tuple[str, str | None]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_proxied(self, method, path, target_url, *, status, credential=None):
        self.proxied.append(
            {
                "method": method,
                "path": path,
                "target_url": target_url,
                "status": status,
                "credential": credential,
            }
        )

    def log_rejected(self, path, status, reason):
        self.rejected.append((path, status, reason))

    def log_home(self, action, target=None):
        self.home.append((action, target))

    def log_error(self, route, status, message):
        self.errors.append((route, status, message))


@dataclass
class FakeOrigin:
    """Stand-in for raw.githubusercontent.com behind an httpx.MockTransport."""

    status: int = 200
    body: bytes = b"file contents"
    headers: dict[str, str] = field(default_factory=lambda: {"content-type": "text/plain; charset=utf-8"})
    error: Exception | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        # A streamed body, as a real transport would produce.
        return httpx.Response(
            self.status,
            headers=self.headers,
            stream=httpx.ByteStream(self.body),
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


RAW_PATH_HEADER = b"x-test-raw-path"


def with_raw_path(app):
    """Let a test header set the ASGI ``raw_path``, which httpx would otherwise clean up."""

    async def wrapped(scope, receive, send):
        if scope["type"] == "http":
            raw_path = dict(scope["headers"]).get(RAW_PATH_HEADER)
            if raw_path:
                scope = {**scope, "raw_path": raw_path}
        await app(scope, receive, send)

    return wrapped


def make_config(**sections: Any) -> Config:
    """Build a Config from keyword sections, e.g. auth={"upstream_token": "U"}."""
    return Config.model_validate(sections)


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def origin() -> FakeOrigin:
    return FakeOrigin()


@pytest.fixture
def make_client(logger: RecordingLogger, origin: FakeOrigin) -> Iterator[Callable[..., TestClient]]:
    """Return a factory that starts the app with the given config sections."""
    clients: list[TestClient] = []

    def factory(rng=None, **sections: Any) -> TestClient:
        app = create_app(make_config(**sections), logger, transport=origin.transport, rng=rng)
        client = TestClient(with_raw_path(app), follow_redirects=False)
        client.__enter__()
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.__exit__(None, None, None)
