"""Telegram Bot API client for sending chat messages."""

from typing import Any

import httpx


class TelegramError(Exception):
    """Telegram rejected the request."""


class TelegramClient:
    """Minimal Telegram Bot API client (``sendMessage`` only)."""

    BASE_URL = "https://api.telegram.org"

    def __init__(
        self,
        bot_token: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.bot_token = bot_token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=f"{self.BASE_URL}/bot{self.bot_token}",
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def send_message(
        self,
        chat_id: str,
        text: str,
        parse_mode: str | None = "HTML",
    ) -> dict[str, Any]:
        """
        Send a text message to a chat.

        Returns:
            The ``result`` object of the API response

        Raises:
            httpx.HTTPError: on transport error or non-2xx status
            TelegramError: when the API answers ``ok: false``
        """
        client = await self._get_client()
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode

        response = await client.post("/sendMessage", json=payload)
        response.raise_for_status()
        data = response.json()
        if not data.get("ok", False):
            raise TelegramError(data.get("description", "unknown Telegram error"))
        return data.get("result", {})
