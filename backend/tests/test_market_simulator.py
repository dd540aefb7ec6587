"""Tests for MarketSimulator: seeding and tick semantics."""

import random

import pytest

from core.market_simulator import MarketSimulator, change_percent
from core.models import (
    FALLBACK_PRICES,
    BasePrice,
    Signal,
    SimulationConfig,
)

T0 = 1_700_000_000_000


class TestInitialSnapshot:
    """Tests for tick-0 snapshot."""

    def test_seeds_every_instrument(self, midpoint_rng):
        sim = MarketSimulator(rng=midpoint_rng)
        snap = sim.initial_snapshot(FALLBACK_PRICES, timestamp=T0)

        assert snap.tick == 0
        assert snap.symbols == [b.symbol for b in FALLBACK_PRICES]
        for base, state in zip(FALLBACK_PRICES, snap):
            assert state.current_price == base.price
            assert len(state.history) == 40
            assert state.history.values() == [base.price] * 40
            assert state.rsi == 50.0
            assert state.stochastic == 50.0
            assert state.signal == Signal.NEUTRAL
            assert state.change_percent == 0.0
            assert state.last_updated == T0


class TestStep:
    """Tests for MarketSimulator.step()."""

    def test_midpoint_tick_end_to_end(self, midpoint_rng):
        """Seed 1.05420, midpoint random source: nothing moves."""
        sim = MarketSimulator(rng=midpoint_rng)
        snap = sim.initial_snapshot([BasePrice("EUR/USD OTC", 1.05420)], timestamp=T0)

        nxt = sim.step(snap, timestamp=T0 + 500)
        state = nxt.get("EUR/USD OTC")

        assert nxt.tick == 1
        assert state.current_price == 1.05420
        assert state.change_percent == 0.0
        assert state.rsi == 50.0
        assert state.stochastic == 50.0
        # trend = 0 -> no BUY/SELL, oscillators mid-range -> NEUTRAL
        assert state.signal == Signal.NEUTRAL
        assert state.last_updated == T0 + 500
        assert state.history.latest.timestamp == T0 + 500
        # Draw order: multiplier, shock, rsi, stochastic
        assert midpoint_rng.calls == [(0.8, 1.2), (-0.5, 0.5), (-2.5, 2.5), (-4.0, 4.0)]

    def test_scripted_tick_end_to_end(self, scripted_rng):
        rng = scripted_rng([1.2, 0.5, -2.5, 4.0])
        sim = MarketSimulator(rng=rng)
        snap = sim.initial_snapshot([BasePrice("EUR/USD OTC", 1.05420)], timestamp=T0)

        state = sim.step(snap, timestamp=T0 + 500).get("EUR/USD OTC")

        expected_price = 1.05420 + 0.5 * 0.00008 * 1.2
        assert state.current_price == pytest.approx(expected_price)
        assert state.change_percent == pytest.approx((expected_price - 1.05420) / 1.05420 * 100)
        assert state.rsi == 47.5
        assert state.stochastic == 54.0
        # Uptrend but rsi 47.5 >= 45
        assert state.signal == Signal.NEUTRAL

    def test_uptrend_with_low_rsi_is_buy(self, scripted_rng):
        config = SimulationConfig(initial_rsi=40.0)
        sim = MarketSimulator(config, rng=scripted_rng([1.0, 0.5, 0.0, 0.0]))
        snap = sim.initial_snapshot([BasePrice("EUR/USD OTC", 1.05420)], timestamp=T0)

        state = sim.step(snap, timestamp=T0 + 500).get("EUR/USD OTC")

        assert state.current_price > 1.05420
        assert state.signal == Signal.BUY
        assert state.direction == "CALL"

    def test_downtrend_with_high_rsi_is_sell(self, scripted_rng):
        config = SimulationConfig(initial_rsi=60.0)
        sim = MarketSimulator(config, rng=scripted_rng([1.0, -0.5, 0.0, 0.0]))
        snap = sim.initial_snapshot([BasePrice("USD/JPY OTC", 154.65)], timestamp=T0)

        state = sim.step(snap, timestamp=T0 + 500).get("USD/JPY OTC")

        assert state.current_price == pytest.approx(154.635)
        assert state.signal == Signal.SELL

    def test_step_does_not_touch_previous_snapshot(self):
        sim = MarketSimulator(rng=random.Random(3))
        snap = sim.initial_snapshot(FALLBACK_PRICES, timestamp=T0)
        before = [(s.current_price, s.history.values()) for s in snap]

        sim.step(snap, timestamp=T0 + 500)

        assert [(s.current_price, s.history.values()) for s in snap] == before
        assert snap.tick == 0

    def test_history_length_constant_over_many_ticks(self):
        sim = MarketSimulator(rng=random.Random(11))
        snap = sim.initial_snapshot(FALLBACK_PRICES, timestamp=T0)

        for i in range(200):
            snap = sim.step(snap, timestamp=T0 + (i + 1) * 500)
            for state in snap:
                assert len(state.history) == 40
                assert 10.0 <= state.rsi <= 90.0
                assert 5.0 <= state.stochastic <= 95.0
                assert state.history.latest.value == state.current_price

        assert snap.tick == 200
        assert snap.symbols == [b.symbol for b in FALLBACK_PRICES]

    def test_change_percent_against_oldest_in_window(self):
        sim = MarketSimulator(rng=random.Random(5))
        snap = sim.initial_snapshot([BasePrice("EUR/USD OTC", 1.0)], timestamp=T0)
        for i in range(60):
            snap = sim.step(snap, timestamp=T0 + (i + 1) * 500)

        state = snap.get("EUR/USD OTC")
        oldest = state.history.oldest.value
        assert state.change_percent == pytest.approx((state.current_price - oldest) / oldest * 100)

    def test_seeded_random_is_reproducible(self):
        def run(seed):
            sim = MarketSimulator(rng=random.Random(seed))
            snap = sim.initial_snapshot(FALLBACK_PRICES, timestamp=T0)
            for i in range(20):
                snap = sim.step(snap, timestamp=T0 + i)
            return [(s.current_price, s.rsi, s.stochastic, s.signal) for s in snap]

        assert run(99) == run(99)


class TestChangePercent:
    def test_basic(self):
        assert change_percent(110.0, 100.0) == pytest.approx(10.0)

    def test_zero_reference(self):
        assert change_percent(1.0, 0.0) == 0.0
