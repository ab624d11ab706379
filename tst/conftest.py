"""Shared pytest fixtures: settings, fake clock, Telegram stub and a relay test client."""

import json
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient

from leadrelay.app import create_app
from leadrelay.shared.config.settings import Settings
from leadrelay.shared.session.store import InMemorySessionStore
from leadrelay.shared.telegram.client import TelegramClient

START_TIME = 1_700_000_000.0


class FakeClock:
    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TelegramStub:
    """Records sendMessage calls and answers with a configurable payload."""

    def __init__(self):
        self.calls = []
        self.status_code = 200
        self.payload = {"ok": True, "result": {"message_id": 1}}
        self.error = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.error is not None:
            raise self.error
        form = {k: v[0] for k, v in parse_qs(request.content.decode("utf-8")).items()}
        self.calls.append({"url": str(request.url), "form": form})
        if isinstance(self.payload, (dict, list)):
            return httpx.Response(self.status_code, json=self.payload)
        return httpx.Response(self.status_code, text=self.payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def build_settings(**overrides) -> Settings:
    values = {
        "bot_token": "123456:TEST-TOKEN",
        "chat_id": "-100200300",
        "site_domain": "leadboost.example",
        "site_name": "LeadBoost",
        "rate_limit_seconds": 30,
        "max_message_length": 1000,
        "session_secret_key": "test-secret",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return build_settings()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def telegram():
    return TelegramStub()


@pytest.fixture
def make_client(store, telegram, clock):
    """Factory for a relay TestClient; one client keeps one session cookie."""

    def _make(settings=None, raise_server_exceptions=True):
        settings = settings or build_settings()
        telegram_client = TelegramClient(
            bot_token=settings.bot_token,
            chat_id=settings.chat_id,
            transport=telegram.transport,
        )
        app = create_app(settings, session_store=store, telegram_client=telegram_client, clock=clock)
        # https base URL so the Secure session cookie is sent back
        return TestClient(app, base_url="https://testserver", raise_server_exceptions=raise_server_exceptions)

    return _make


@pytest.fixture
def client(make_client, settings):
    return make_client(settings)


def post_json(client, payload, headers=None, **kwargs):
    request_headers = {"Content-Type": "application/json"}
    request_headers.update(headers or {})
    return client.post(
        "/api/relay",
        content=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
        headers=request_headers,
        **kwargs,
    )


@pytest.fixture
def post_lead():
    return post_json
