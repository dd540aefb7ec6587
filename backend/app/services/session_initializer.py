"""One-shot session bootstrap: base prices from live rates or fallback table.

Flow:
1. Fetch the USD rate table from the rate source
2. Derive each pair's base price with a fixed cross-rate formula
3. On any failure, use FALLBACK_PRICES and mark the session simulated-only

Runs exactly once per session; later calls return the first result.
"""

import logging
import math
from dataclasses import dataclass

from app.clients import ExchangeRateClient, RateSourceError
from core.models import FALLBACK_PRICES, BasePrice, SessionStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CrossRate:
    """Base price formula ``numerator / denominator`` over a USD rate table.

    A missing side stands for USD itself (rate 1.0), so EUR/USD is
    ``CrossRate(denominator="EUR")`` = 1 / rates["EUR"].
    """

    symbol: str
    numerator: str | None = None
    denominator: str | None = None

    def price(self, rates: dict[str, float]) -> float:
        num = _rate(rates, self.numerator)
        den = _rate(rates, self.denominator)
        return num / den


def _rate(rates: dict[str, float], code: str | None) -> float:
    if code is None:
        return 1.0
    if code not in rates:
        raise RateSourceError(f"Rate table is missing {code}")
    value = rates[code]
    if not math.isfinite(value) or value <= 0:
        raise RateSourceError(f"Rate for {code} is not positive and finite: {value}")
    return value


# Same order as FALLBACK_PRICES
CROSS_RATES: list[CrossRate] = [
    CrossRate("EUR/USD OTC", denominator="EUR"),
    CrossRate("GBP/USD OTC", denominator="GBP"),
    CrossRate("USD/JPY OTC", numerator="JPY"),
    CrossRate("AUD/CAD OTC", numerator="CAD", denominator="AUD"),
    CrossRate("USD/CHF OTC", numerator="CHF"),
    CrossRate("NZD/USD OTC", denominator="NZD"),
    CrossRate("EUR/JPY OTC", numerator="JPY", denominator="EUR"),
    CrossRate("GBP/JPY OTC", numerator="JPY", denominator="GBP"),
]


def derive_base_prices(
    rates: dict[str, float],
    cross_rates: list[CrossRate] | None = None,
) -> list[BasePrice]:
    """Apply the cross-rate formulas to a USD rate table.

    Raises:
        RateSourceError: if a required currency is missing or non-positive
    """
    return [BasePrice(symbol=c.symbol, price=c.price(rates)) for c in (cross_rates or CROSS_RATES)]


@dataclass(frozen=True)
class SessionBootstrap:
    """Result of session initialization."""

    base_prices: list[BasePrice]
    status: SessionStatus
    error: str | None = None

    @property
    def rate_synchronized(self) -> bool:
        return self.status == SessionStatus.RATE_SYNCHRONIZED


class SessionInitializer:
    """Produce the session's base prices once."""

    def __init__(
        self,
        rate_client: ExchangeRateClient,
        fallback: list[BasePrice] | None = None,
        cross_rates: list[CrossRate] | None = None,
    ):
        self.rate_client = rate_client
        self.fallback = list(fallback or FALLBACK_PRICES)
        self.cross_rates = list(cross_rates or CROSS_RATES)
        self._result: SessionBootstrap | None = None

    async def initialize(self) -> SessionBootstrap:
        """Fetch rates and derive base prices, falling back on any failure."""
        if self._result is not None:
            return self._result

        try:
            rates = await self.rate_client.get_rates()
            prices = derive_base_prices(rates, self.cross_rates)
            result = SessionBootstrap(prices, SessionStatus.RATE_SYNCHRONIZED)
            logger.info("Base prices synchronized with live rates (%d pairs)", len(prices))
        except RateSourceError as e:
            logger.warning(f"Error fetching live rates, using fallback prices: {e}")
            result = SessionBootstrap(list(self.fallback), SessionStatus.SIMULATED_ONLY, str(e))
        except Exception as e:
            logger.warning(f"Unexpected rate source failure, using fallback prices: {e}")
            result = SessionBootstrap(list(self.fallback), SessionStatus.SIMULATED_ONLY, str(e))
        finally:
            await self.rate_client.close()

        self._result = result
        return result
