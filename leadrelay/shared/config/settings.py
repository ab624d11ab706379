"""Relay configuration loaded once at startup from the environment."""

import os
import secrets
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import dotenv_values

from leadrelay.shared.relay.errors import ConfigError


DEFAULT_RATE_LIMIT_SECONDS = 30
DEFAULT_MAX_MESSAGE_LENGTH = 1000
DEFAULT_TELEGRAM_API_BASE = "https://api.telegram.org"


def _as_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "y", "on")


def _as_positive_int(value: Optional[str], default: int) -> int:
    """Parses an int, falling back to default for missing, invalid or non-positive values."""
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _first(env: Mapping[str, str], *names: str) -> str:
    for name in names:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return ""


@dataclass(frozen=True)
class Settings:
    bot_token: str = field(repr=False)
    chat_id: str
    site_domain: str = ""
    site_name: str = ""
    rate_limit_seconds: int = DEFAULT_RATE_LIMIT_SECONDS
    max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH
    debug_mode: bool = False
    log_submissions: bool = False
    session_secret_key: str = field(default_factory=lambda: secrets.token_hex(32), repr=False)
    session_store_url: Optional[str] = None
    session_https_only: Optional[bool] = None
    telegram_api_base: str = DEFAULT_TELEGRAM_API_BASE
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.bot_token or not self.chat_id:
            raise ConfigError(detail="BOT_TOKEN and CHAT_ID must be configured")

    @property
    def allowed_origin(self) -> str:
        """Origin reflected in CORS headers: wildcard in debug mode, the site domain otherwise."""
        if self.debug_mode:
            return "*"
        return f"https://{self.site_domain}"

    @property
    def secure_session_cookie(self) -> bool:
        """Whether the session cookie carries the Secure flag. Defaults to on outside debug mode."""
        if self.session_https_only is None:
            return not self.debug_mode
        return self.session_https_only

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, env_file: Optional[str] = ".env") -> "Settings":
        """
        Build settings from environment variables.

        Values from ``env_file`` (if it exists) fill in keys missing from the
        environment; the real environment always wins.

        Raises:
            ConfigError if the bot token or chat id is missing
        """
        env = {}
        if env_file and os.path.exists(env_file):
            env.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
        env.update(os.environ if environ is None else environ)

        debug_mode = _as_bool(env.get("DEBUG_MODE"))
        return cls(
            bot_token=_first(env, "BOT_TOKEN", "TELEGRAM_BOT_TOKEN"),
            chat_id=_first(env, "CHAT_ID", "TELEGRAM_CHAT_ID"),
            site_domain=_first(env, "SITE_DOMAIN"),
            site_name=_first(env, "SITE_NAME"),
            rate_limit_seconds=_as_positive_int(env.get("RATE_LIMIT_SECONDS"), DEFAULT_RATE_LIMIT_SECONDS),
            max_message_length=_as_positive_int(env.get("MAX_MESSAGE_LENGTH"), DEFAULT_MAX_MESSAGE_LENGTH),
            debug_mode=debug_mode,
            log_submissions=_as_bool(env.get("LOG_SUBMISSIONS")),
            session_secret_key=_first(env, "SESSION_SECRET_KEY") or secrets.token_hex(32),
            session_store_url=_first(env, "SESSION_STORE_URL") or None,
            session_https_only=_as_bool(env["SESSION_HTTPS_ONLY"]) if _first(env, "SESSION_HTTPS_ONLY") else None,
            telegram_api_base=(_first(env, "TELEGRAM_API_BASE") or DEFAULT_TELEGRAM_API_BASE).rstrip("/"),
            log_level=(_first(env, "LOG_LEVEL") or ("DEBUG" if debug_mode else "INFO")).upper(),
        )
