"""Simulation configuration models."""

from __future__ import annotations

from pydantic import BaseModel, model_validator

from core.models.market import BasePrice


class SimulationConfig(BaseModel):
    """Numeric constants of the synthetic market."""

    # History buffer
    history_capacity: int = 40
    seed_spacing_ms: int = 1000

    # Price random walk (base step per volatility class)
    high_magnitude_marker: str = "JPY"
    high_magnitude_step: float = 0.03
    standard_step: float = 0.00008
    step_multiplier_lo: float = 0.8
    step_multiplier_hi: float = 1.2

    # Synthetic oscillators
    initial_rsi: float = 50.0
    rsi_step: float = 2.5
    rsi_lo: float = 10.0
    rsi_hi: float = 90.0
    initial_stochastic: float = 50.0
    stochastic_step: float = 4.0
    stochastic_lo: float = 5.0
    stochastic_hi: float = 95.0

    # Signal trend lookback (points back from the newest, inclusive)
    trend_lookback: int = 10

    @model_validator(mode="after")
    def _validate(self):
        if self.history_capacity < self.trend_lookback:
            raise ValueError(
                f"history_capacity ({self.history_capacity}) must be >= "
                f"trend_lookback ({self.trend_lookback})"
            )
        if self.rsi_lo > self.rsi_hi or self.stochastic_lo > self.stochastic_hi:
            raise ValueError("oscillator bounds must satisfy lo <= hi")
        return self


# =============================================================================
# Built-in base prices, used when the live rate table cannot be fetched.
# Approximate values; order here is the display order.
# =============================================================================
FALLBACK_PRICES: list[BasePrice] = [
    BasePrice(symbol="EUR/USD OTC", price=1.05420),
    BasePrice(symbol="GBP/USD OTC", price=1.26120),
    BasePrice(symbol="USD/JPY OTC", price=154.65),
    BasePrice(symbol="AUD/CAD OTC", price=0.91380),
    BasePrice(symbol="USD/CHF OTC", price=0.88550),
    BasePrice(symbol="NZD/USD OTC", price=0.58420),
    BasePrice(symbol="EUR/JPY OTC", price=163.15),
    BasePrice(symbol="GBP/JPY OTC", price=195.35),
]
