import logging
from typing import Dict, Optional

import httpx

from leadrelay.shared.relay.errors import UpstreamUnreachable, UpstreamRejected


class TelegramClient:
    """Client for the Telegram Bot API sendMessage method."""

    BASE_URL = "https://api.telegram.org"
    TIMEOUT_SECONDS = 10.0

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        api_base: Optional[str] = None,
        timeout: float = TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.api_base = (api_base or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def send_message_url(self) -> str:
        return f"{self.api_base}/bot{self.bot_token}/sendMessage"

    async def send_message(self, text: str) -> Dict:
        """
        Send an HTML-formatted message to the configured chat.

        Args:
            text: Message body using Telegram's HTML markup

        Returns:
            The decoded Telegram acknowledgment (``ok`` is true)

        Raises:
            UpstreamUnreachable: the request failed or timed out
            UpstreamRejected: Telegram answered without ``ok: true``
        """
        data = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": "true",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.send_message_url, data=data)
        except httpx.HTTPError as e:
            # The exception text can carry the request URL, and with it the token
            logging.error(f"Telegram API request failed: {type(e).__name__}")
            raise UpstreamUnreachable(detail=type(e).__name__) from e

        try:
            result = response.json()
        except ValueError:
            result = None

        if not isinstance(result, dict) or not result.get("ok"):
            description = None
            if isinstance(result, dict):
                description = result.get("description")
            description = description or f"HTTP {response.status_code}"
            logging.error(f"Telegram API error: {description}")
            raise UpstreamRejected(detail=description)

        return result
