"""Tests for session bootstrap (live rates vs fallback table)."""

import httpx
import pytest

from app.clients import ExchangeRateClient, RateSourceError
from app.services import SessionInitializer, derive_base_prices
from core.models import FALLBACK_PRICES, SessionStatus

RATES = {
    "USD": 1.0,
    "EUR": 0.95,
    "GBP": 0.8,
    "JPY": 150.0,
    "AUD": 1.5,
    "CAD": 1.35,
    "CHF": 0.9,
    "NZD": 1.7,
}


def _client(handler) -> ExchangeRateClient:
    return ExchangeRateClient(url="https://rates.test/latest/USD", transport=httpx.MockTransport(handler))


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"result": "success", "base_code": "USD", "rates": RATES})


class TestDeriveBasePrices:
    """Tests for cross-rate formulas."""

    def test_formulas(self):
        prices = {b.symbol: b.price for b in derive_base_prices(RATES)}

        assert prices["EUR/USD OTC"] == pytest.approx(1 / 0.95)
        assert prices["GBP/USD OTC"] == pytest.approx(1 / 0.8)
        assert prices["USD/JPY OTC"] == pytest.approx(150.0)
        assert prices["AUD/CAD OTC"] == pytest.approx(1.35 / 1.5)
        assert prices["USD/CHF OTC"] == pytest.approx(0.9)
        assert prices["NZD/USD OTC"] == pytest.approx(1 / 1.7)
        assert prices["EUR/JPY OTC"] == pytest.approx(150.0 / 0.95)
        assert prices["GBP/JPY OTC"] == pytest.approx(150.0 / 0.8)

    def test_same_order_as_fallback(self):
        assert [b.symbol for b in derive_base_prices(RATES)] == [b.symbol for b in FALLBACK_PRICES]

    def test_missing_currency_raises(self):
        rates = dict(RATES)
        del rates["NZD"]
        with pytest.raises(RateSourceError, match="NZD"):
            derive_base_prices(rates)

    def test_zero_rate_raises(self):
        with pytest.raises(RateSourceError, match="not positive"):
            derive_base_prices({**RATES, "EUR": 0.0})

    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_non_finite_rate_raises(self, value):
        with pytest.raises(RateSourceError, match="finite"):
            derive_base_prices({**RATES, "JPY": value})


class TestSessionInitializer:
    """Tests for SessionInitializer."""

    @pytest.mark.asyncio
    async def test_success_marks_rate_synchronized(self):
        init = SessionInitializer(_client(_ok))
        result = await init.initialize()

        assert result.status == SessionStatus.RATE_SYNCHRONIZED
        assert result.rate_synchronized
        assert result.error is None
        assert result.base_prices[2].price == pytest.approx(150.0)

    @pytest.mark.asyncio
    async def test_network_error_falls_back(self):
        def handler(request):
            raise httpx.ConnectError("no route to host", request=request)

        result = await SessionInitializer(_client(handler)).initialize()

        assert result.status == SessionStatus.SIMULATED_ONLY
        assert not result.rate_synchronized
        assert result.base_prices == FALLBACK_PRICES
        assert [(b.symbol, b.price) for b in result.base_prices] == [
            ("EUR/USD OTC", 1.05420),
            ("GBP/USD OTC", 1.26120),
            ("USD/JPY OTC", 154.65),
            ("AUD/CAD OTC", 0.91380),
            ("USD/CHF OTC", 0.88550),
            ("NZD/USD OTC", 0.58420),
            ("EUR/JPY OTC", 163.15),
            ("GBP/JPY OTC", 195.35),
        ]

    @pytest.mark.asyncio
    async def test_http_error_status_falls_back(self):
        result = await SessionInitializer(_client(lambda r: httpx.Response(503))).initialize()
        assert result.status == SessionStatus.SIMULATED_ONLY
        assert result.base_prices == FALLBACK_PRICES

    @pytest.mark.asyncio
    async def test_malformed_body_falls_back(self):
        result = await SessionInitializer(
            _client(lambda r: httpx.Response(200, text="<html>oops</html>"))
        ).initialize()
        assert result.status == SessionStatus.SIMULATED_ONLY

    @pytest.mark.asyncio
    async def test_error_result_falls_back(self):
        result = await SessionInitializer(
            _client(lambda r: httpx.Response(200, json={"result": "error", "error-type": "quota"}))
        ).initialize()
        assert result.status == SessionStatus.SIMULATED_ONLY
        assert "error" in result.error

    @pytest.mark.asyncio
    async def test_missing_currency_falls_back(self):
        rates = {k: v for k, v in RATES.items() if k != "CHF"}
        result = await SessionInitializer(
            _client(lambda r: httpx.Response(200, json={"result": "success", "rates": rates}))
        ).initialize()
        assert result.status == SessionStatus.SIMULATED_ONLY
        assert result.base_prices == FALLBACK_PRICES

    @pytest.mark.asyncio
    async def test_infinite_rate_in_body_falls_back(self):
        body = b'{"result": "success", "rates": {"USD": 1, "EUR": Infinity, "GBP": 0.8, "JPY": 150, ' \
               b'"AUD": 1.5, "CAD": 1.35, "CHF": 0.9, "NZD": 1.7}}'
        result = await SessionInitializer(
            _client(lambda r: httpx.Response(200, content=body, headers={"content-type": "application/json"}))
        ).initialize()

        assert result.status == SessionStatus.SIMULATED_ONLY
        assert result.base_prices == FALLBACK_PRICES

    @pytest.mark.asyncio
    async def test_runs_only_once(self):
        calls = []

        def handler(request):
            calls.append(request)
            return _ok(request)

        init = SessionInitializer(_client(handler))
        first = await init.initialize()
        second = await init.initialize()

        assert first is second
        assert len(calls) == 1
