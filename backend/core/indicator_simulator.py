"""Synthetic RSI / Stochastic oscillators.

Both values are independent bounded random walks. They are not computed
from the price series.
"""

from __future__ import annotations

from core.models.config import SimulationConfig
from core.random_source import RandomSource, default_random_source


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp ``value`` into [lo, hi]."""
    return max(lo, min(hi, value))


class IndicatorSimulator:
    """Produce the next (rsi, stochastic) pair."""

    def __init__(
        self,
        config: SimulationConfig | None = None,
        rng: RandomSource | None = None,
    ):
        self.config = config or SimulationConfig()
        self.rng = rng or default_random_source()

    def next_rsi(self, rsi: float) -> float:
        cfg = self.config
        drift = self.rng.uniform(-cfg.rsi_step, cfg.rsi_step)
        return clamp(rsi + drift, cfg.rsi_lo, cfg.rsi_hi)

    def next_stochastic(self, stochastic: float) -> float:
        cfg = self.config
        drift = self.rng.uniform(-cfg.stochastic_step, cfg.stochastic_step)
        return clamp(stochastic + drift, cfg.stochastic_lo, cfg.stochastic_hi)

    def next_values(self, rsi: float, stochastic: float) -> tuple[float, float]:
        """Advance both oscillators (RSI is drawn first)."""
        return self.next_rsi(rsi), self.next_stochastic(stochastic)
