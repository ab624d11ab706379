"""Request-scoped access to the session identity and the shared collaborators on app.state."""

import secrets

from fastapi import Request

from leadrelay.shared.config.settings import Settings
from leadrelay.shared.relay.errors import ConfigError
from leadrelay.shared.session.store import SessionStore, InMemorySessionStore
from leadrelay.shared.session.database import SqlSessionStore
from leadrelay.shared.telegram.client import TelegramClient

SESSION_ID_KEY = "sid"


def build_session_store(settings: Settings) -> SessionStore:
    """Durable SQL store when SESSION_STORE_URL is configured, process memory otherwise."""
    if settings.session_store_url:
        return SqlSessionStore(settings.session_store_url)
    return InMemorySessionStore()


def get_session_id(request: Request) -> str:
    """Returns the browser session id, creating one on the first request."""
    session_id = request.session.get(SESSION_ID_KEY)
    if not session_id:
        session_id = secrets.token_urlsafe(16)
        request.session[SESSION_ID_KEY] = session_id
    return session_id


def get_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise ConfigError(detail="Settings are not loaded")
    return settings


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_telegram_client(request: Request) -> TelegramClient:
    return request.app.state.telegram_client


def get_clock(request: Request):
    return request.app.state.clock
