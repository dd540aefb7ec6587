"""Exchange-rate REST client (open.er-api.com format)."""

from typing import Any

import httpx


class RateSourceError(Exception):
    """Rate table could not be fetched or parsed."""


class ExchangeRateClient:
    """Client for a base-currency exchange-rate table.

    Expected response shape::

        {"result": "success", "base_code": "USD", "rates": {"EUR": 0.92, ...}}
    """

    def __init__(
        self,
        url: str = "https://open.er-api.com/v6/latest/USD",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def get_rates(self) -> dict[str, float]:
        """
        Fetch the rate table.

        Returns:
            Mapping of currency code to units per base currency

        Raises:
            RateSourceError: on network error, non-2xx status or malformed body
        """
        client = await self._get_client()
        try:
            response = await client.get(self.url)
            response.raise_for_status()
            data: Any = response.json()
        except httpx.HTTPError as e:
            raise RateSourceError(f"Rate request failed: {e}") from e
        except ValueError as e:
            raise RateSourceError(f"Rate response is not JSON: {e}") from e

        if not isinstance(data, dict):
            raise RateSourceError("Rate response is not an object")
        if data.get("result", "success") != "success":
            raise RateSourceError(f"Rate source returned result={data.get('result')!r}")

        rates = data.get("rates")
        if not isinstance(rates, dict) or not rates:
            raise RateSourceError("Rate response has no 'rates' table")

        parsed: dict[str, float] = {}
        for code, value in rates.items():
            try:
                parsed[str(code)] = float(value)
            except (TypeError, ValueError):
                continue
        return parsed
