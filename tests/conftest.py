"""Fixtures comunes: servidor falso sobre httpx.MockTransport y clientes."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import parse_qsl

import httpx
import pytest

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from adapters.http_client import build_http_client  # noqa: E402
from core.config import AppSettings  # noqa: E402
from core.services.client import SmugMugClient  # noqa: E402


@dataclass
class FakeServer:
    """Registra cada request y responde con el cuerpo/status configurado."""

    status: int = 200
    body: str = '{"stat": "ok", "method": "smugmug.test"}'
    error: Exception | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def reply(self, payload: Any = None, *, text: str | None = None, status: int = 200) -> None:
        self.status = status
        self.body = text if text is not None else json.dumps(payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status, text=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def form(self, index: int = -1) -> dict[str, str]:
        return dict(parse_qsl(self.requests[index].content.decode("utf-8"), keep_blank_values=True))


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def transport(server: FakeServer) -> httpx.MockTransport:
    return httpx.MockTransport(server.handler)


def make_settings(**overrides: Any) -> AppSettings:
    values: dict[str, Any] = {"api_key": "test-key", "api_version": "1.2.1"}
    values.update(overrides)
    return AppSettings(_env_file=None, **values)


@pytest.fixture
def settings() -> AppSettings:
    return make_settings()


@pytest.fixture
def http(settings: AppSettings, transport: httpx.MockTransport):
    client = build_http_client(settings, transport=transport)
    yield client
    client.close()


@pytest.fixture
def client(settings: AppSettings, transport: httpx.MockTransport):
    with SmugMugClient(settings, transport=transport) as c:
        yield c


@pytest.fixture
def client_v120(transport: httpx.MockTransport):
    with SmugMugClient(make_settings(api_version="1.2.0"), transport=transport) as c:
        yield c
