"""Lead Relay - FastAPI service forwarding landing page leads to Telegram."""

import logging
import time
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from leadrelay.shared.config.logging_config import setup_logging
from leadrelay.shared.config.settings import Settings
from leadrelay.shared.relay.errors import RelayError, ConfigError, UpstreamRejected, UpstreamUnreachable
from leadrelay.shared.relay.routes import router as relay_router, cors_headers
from leadrelay.shared.relay.schemas import RelayResponse
from leadrelay.shared.session.dependencies import build_session_store
from leadrelay.shared.session.store import SessionStore
from leadrelay.shared.telegram.client import TelegramClient

SESSION_MAX_AGE_SECONDS = 60 * 60 * 24 * 14


def _error_headers(request: Request) -> dict:
    settings = getattr(request.app.state, "settings", None)
    return cors_headers(settings) if settings is not None else {}


def _debug_mode(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.debug_mode)


async def relay_error_handler(request: Request, exc: RelayError):
    """Turns every relay failure into the {success, message} envelope with CORS headers."""
    if isinstance(exc, ConfigError):
        logging.error(f"Relay configuration error: {exc.detail or exc.message}")
    elif exc.status_code >= 500 and not isinstance(exc, (UpstreamRejected, UpstreamUnreachable)):
        # Upstream failures are logged by the Telegram client
        logging.error(f"Relay failure ({type(exc).__name__}): {exc.detail or exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=RelayResponse(success=False, message=exc.public_message(_debug_mode(request))).model_dump(),
        headers=_error_headers(request),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Ensure unexpected errors still answer with the relay envelope."""
    logging.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=RelayResponse(success=False, message=RelayError.default_message).model_dump(),
        headers=_error_headers(request),
    )


def create_app(
    settings: Optional[Settings] = None,
    session_store: Optional[SessionStore] = None,
    telegram_client: Optional[TelegramClient] = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    """
    Build the relay application.

    Settings are loaded from the environment when not given, so a missing
    bot token or chat id stops the process at startup with ConfigError.
    """
    if settings is None:
        try:
            settings = Settings.from_env()
        except ConfigError as e:
            logging.error(f"Cannot start relay: {e.detail}")
            raise

    if session_store is None:
        session_store = build_session_store(settings)

    if telegram_client is None:
        telegram_client = TelegramClient(
            bot_token=settings.bot_token,
            chat_id=settings.chat_id,
            api_base=settings.telegram_api_base,
        )

    app = FastAPI(
        title="Lead Relay",
        description="Forwards landing page contact form leads to Telegram",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.session_store = session_store
    app.state.telegram_client = telegram_client
    app.state.clock = clock

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        max_age=SESSION_MAX_AGE_SECONDS,
        same_site="lax",
        https_only=settings.secure_session_cookie,
    )

    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include relay routes
    app.include_router(relay_router)

    @app.get("/")
    async def root():
        return {"message": "Lead Relay is running", "status": "ok"}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


if __name__ == "__main__":
    import uvicorn
    startup_settings = Settings.from_env()
    setup_logging(startup_settings.log_level)
    uvicorn.run(create_app(startup_settings), host="0.0.0.0", port=8000, log_config=None)
