from __future__ import annotations

import asyncio
from typing import Any, Callable

import httpx
import pytest

from geocore.adapters.http_client import build_async_client
from geocore.core.config import GeocoreSettings
from geocore.core.services.geocore import Geocore

BASE_URL = "https://api.geocore.test/api"
PROJECT_ID = "PRO-TEST-1"


def envelope(result: Any = None, *, status: str = "success", code: str | None = None, message: str | None = None) -> httpx.Response:
    body: dict[str, Any] = {"status": status, "result": result}
    if code is not None:
        body["code"] = code
    if message is not None:
        body["message"] = message
    return httpx.Response(200, json=body)


class RecordingHandler:
    """MockTransport handler that keeps every request it sees."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def settings(tmp_path, monkeypatch) -> GeocoreSettings:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return GeocoreSettings(base_url=BASE_URL, project_id=PROJECT_ID, _env_file=None)


@pytest.fixture
def make_geocore(settings):
    clients: list[httpx.AsyncClient] = []

    def _make(respond: Callable[[httpx.Request], httpx.Response]) -> tuple[Geocore, RecordingHandler]:
        handler = RecordingHandler(respond)
        client = build_async_client(settings, transport=httpx.MockTransport(handler))
        clients.append(client)
        return Geocore(settings, client=client), handler

    yield _make

    for client in clients:
        asyncio.run(client.aclose())
