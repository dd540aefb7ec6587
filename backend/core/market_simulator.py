"""One simulation tick across all instruments.

MarketSimulator holds no market state itself: step() takes the previous
Snapshot and returns a brand new one. The scheduler in
app/services/simulation_loop.py publishes it by swapping a single
reference, so readers only ever see complete snapshots.

Per instrument, in order:
1. next price (PriceSeriesGenerator)
2. push (now, price) into history, evicting the oldest point
3. next rsi / stochastic (IndicatorSimulator)
4. trend from the updated history
5. change % against the oldest point of the updated history
6. classify signal
7. stamp last_updated
"""

from __future__ import annotations

import time
from typing import Iterable

from core.indicator_simulator import IndicatorSimulator
from core.models.config import SimulationConfig
from core.models.market import (
    BasePrice,
    HistoryBuffer,
    InstrumentState,
    PricePoint,
    Signal,
    Snapshot,
)
from core.price_generator import PriceSeriesGenerator
from core.random_source import RandomSource, default_random_source
from core.signal_classifier import classify, compute_trend


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


def change_percent(price: float, reference: float) -> float:
    """Percentage change of ``price`` relative to ``reference``."""
    if reference == 0:
        return 0.0
    return (price - reference) / reference * 100


class MarketSimulator:
    """Build and advance market snapshots."""

    def __init__(
        self,
        config: SimulationConfig | None = None,
        rng: RandomSource | None = None,
    ):
        self.config = config or SimulationConfig()
        # Shared so the draw order per instrument is fixed:
        # multiplier, shock, rsi drift, stochastic drift.
        self.rng = rng or default_random_source()
        self.prices = PriceSeriesGenerator(self.config, self.rng)
        self.indicators = IndicatorSimulator(self.config, self.rng)

    def seed_instrument(self, base: BasePrice, timestamp: int) -> InstrumentState:
        """Create the starting state of one instrument."""
        history = HistoryBuffer.seeded(
            price=base.price,
            capacity=self.config.history_capacity,
            now_ms=timestamp,
            spacing_ms=self.config.seed_spacing_ms,
        )
        return InstrumentState(
            symbol=base.symbol,
            current_price=base.price,
            history=history,
            change_percent=0.0,
            rsi=self.config.initial_rsi,
            stochastic=self.config.initial_stochastic,
            signal=Signal.NEUTRAL,
            last_updated=timestamp,
        )

    def initial_snapshot(
        self,
        base_prices: Iterable[BasePrice],
        timestamp: int | None = None,
    ) -> Snapshot:
        """Create tick-0 snapshot from base prices (order preserved)."""
        ts = now_ms() if timestamp is None else timestamp
        return Snapshot.from_instruments(
            (self.seed_instrument(b, ts) for b in base_prices),
            tick=0,
            created_at=ts,
        )

    def advance(self, state: InstrumentState, timestamp: int) -> InstrumentState:
        """Advance a single instrument by one tick."""
        price = self.prices.next_price(state.symbol, state.current_price)
        history = state.history.push(PricePoint(timestamp=timestamp, value=price))
        rsi, stochastic = self.indicators.next_values(state.rsi, state.stochastic)
        trend = compute_trend(history, price, self.config.trend_lookback)
        change = change_percent(price, history.oldest.value)

        return state.evolve(
            current_price=price,
            history=history,
            change_percent=change,
            rsi=rsi,
            stochastic=stochastic,
            signal=classify(rsi, stochastic, trend),
            last_updated=timestamp,
        )

    def step(self, snapshot: Snapshot, timestamp: int | None = None) -> Snapshot:
        """Produce the next snapshot. ``snapshot`` is left untouched."""
        ts = now_ms() if timestamp is None else timestamp
        return Snapshot.from_instruments(
            (self.advance(state, ts) for state in snapshot),
            tick=snapshot.tick + 1,
            created_at=ts,
        )
