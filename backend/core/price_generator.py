"""Synthetic price random walk.

The base step depends on the quote scale of the symbol, not on real
volatility: JPY-quoted pairs trade around 150 while the others trade
around 1, so they get a larger step.

Each tick:
    step  = base_step * uniform(0.8, 1.2)
    price = price + uniform(-0.5, 0.5) * step

No floor or ceiling is applied.
"""

from __future__ import annotations

from enum import Enum

from core.models.config import SimulationConfig
from core.random_source import RandomSource, default_random_source


class VolatilityClass(str, Enum):
    """Quote-scale class of an instrument."""

    HIGH_MAGNITUDE = "high_magnitude"
    STANDARD = "standard"


class PriceSeriesGenerator:
    """Produce the next synthetic price from the current one."""

    def __init__(
        self,
        config: SimulationConfig | None = None,
        rng: RandomSource | None = None,
    ):
        self.config = config or SimulationConfig()
        self.rng = rng or default_random_source()

    def volatility_class(self, symbol: str) -> VolatilityClass:
        """Classify a symbol by its quote scale."""
        if self.config.high_magnitude_marker in symbol:
            return VolatilityClass.HIGH_MAGNITUDE
        return VolatilityClass.STANDARD

    def base_step(self, symbol: str) -> float:
        if self.volatility_class(symbol) == VolatilityClass.HIGH_MAGNITUDE:
            return self.config.high_magnitude_step
        return self.config.standard_step

    def next_price(self, symbol: str, current_price: float) -> float:
        """Generate the next price for ``symbol``.

        Draws two values from the random source, in order: the step
        multiplier, then the signed shock.
        """
        step = self.base_step(symbol) * self.rng.uniform(
            self.config.step_multiplier_lo, self.config.step_multiplier_hi
        )
        shock = self.rng.uniform(-0.5, 0.5)
        return current_price + shock * step
