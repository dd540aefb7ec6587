"""Gemini REST client for short text generation."""

from typing import Any

import httpx


class GeminiClient:
    """Minimal client for the Gemini ``generateContent`` endpoint."""

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.BASE_URL,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_output_tokens: int = 100,
    ) -> str:
        """
        Generate text for ``prompt``.

        Returns:
            Concatenated text of the first candidate ("" if none)

        Raises:
            httpx.HTTPError: on transport error or non-2xx status
        """
        client = await self._get_client()
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
            },
        }
        response = await client.post(f"/models/{self.model}:generateContent", json=payload)
        response.raise_for_status()
        return _extract_text(response.json())


def _extract_text(data: Any) -> str:
    """Pull the first candidate's text out of a generateContent response."""
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict)).strip()
