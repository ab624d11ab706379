"""Relay failure taxonomy. Each error knows its HTTP status and its public message."""

from typing import Optional


class RelayError(Exception):
    """Base class for every failure the relay reports to the browser."""
    status_code = 500
    default_message = "Внутренняя ошибка сервера"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail  # internal, never shown outside debug mode
        super().__init__(detail or self.message)

    def public_message(self, debug_mode: bool = False) -> str:
        return self.message


class ConfigError(RelayError):
    """Raised when the bot token or chat id is not configured."""
    status_code = 500
    default_message = "Ошибка конфигурации сервера"


class MethodNotAllowed(RelayError):
    status_code = 405
    default_message = "Метод не поддерживается"


class RateLimited(RelayError):
    """Raised when a session submits again inside the rate-limit window."""
    status_code = 429
    default_message = "Слишком много запросов. Попробуйте позже."

    def __init__(self, retry_after: int, window: int):
        self.retry_after = retry_after
        self.window = window
        super().__init__(
            f"Слишком много запросов. Попробуйте через {retry_after} секунд "
            f"(не чаще одного раза в {window} секунд)."
        )


class BadRequest(RelayError):
    status_code = 400
    default_message = "Некорректный запрос"


class MalformedJSON(BadRequest):
    default_message = "Некорректный JSON"


class InvalidPayload(BadRequest):
    default_message = "Некорректные данные формы"


class MissingField(BadRequest):
    default_message = "Имя и Telegram обязательны"


class InvalidName(BadRequest):
    default_message = "Некорректное имя"


class InvalidContact(BadRequest):
    default_message = "Некорректный Telegram username"


class UpstreamUnreachable(RelayError):
    """Raised when the Telegram API cannot be reached at all."""
    status_code = 500
    default_message = "Ошибка отправки сообщения"


class UpstreamRejected(RelayError):
    """Raised when the Telegram API answers without ok=true."""
    status_code = 500
    default_message = "Ошибка отправки в Telegram"

    def public_message(self, debug_mode: bool = False) -> str:
        if debug_mode:
            return f"Telegram API error: {self.detail or 'Unknown error'}"
        return self.message
