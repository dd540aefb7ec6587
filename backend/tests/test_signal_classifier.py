"""Tests for signal classification and trend."""

import pytest

from core.models import HistoryBuffer, PricePoint, Signal
from core.signal_classifier import classify, compute_trend


class TestClassify:
    """Tests for classify() priority order."""

    @pytest.mark.parametrize("rsi,stoch,trend,expected", [
        (25.0, 15.0, 0.0, Signal.STRONG_BUY),
        (75.0, 85.0, 0.0, Signal.STRONG_SELL),
        (40.0, 50.0, 0.001, Signal.BUY),
        (60.0, 50.0, -0.001, Signal.SELL),
        (50.0, 50.0, 0.001, Signal.NEUTRAL),
        (50.0, 50.0, -0.001, Signal.NEUTRAL),
    ])
    def test_each_rule(self, rsi, stoch, trend, expected):
        assert classify(rsi, stoch, trend) == expected

    def test_strong_buy_wins_over_buy(self):
        # Also satisfies rsi < 45 and trend > 0
        assert classify(25.0, 15.0, 1.0) == Signal.STRONG_BUY

    def test_strong_sell_wins_over_sell(self):
        assert classify(75.0, 85.0, -1.0) == Signal.STRONG_SELL

    def test_low_rsi_without_low_stochastic_needs_uptrend(self):
        assert classify(25.0, 50.0, 1.0) == Signal.BUY
        assert classify(25.0, 50.0, 0.0) == Signal.NEUTRAL
        assert classify(25.0, 50.0, -1.0) == Signal.NEUTRAL

    def test_thresholds_are_strict(self):
        assert classify(30.0, 15.0, 0.0) == Signal.NEUTRAL
        assert classify(29.0, 20.0, 0.0) == Signal.NEUTRAL
        assert classify(70.0, 85.0, 0.0) == Signal.NEUTRAL
        assert classify(45.0, 50.0, 1.0) == Signal.NEUTRAL
        assert classify(55.0, 50.0, -1.0) == Signal.NEUTRAL

    def test_flat_trend_is_neutral(self):
        assert classify(40.0, 50.0, 0.0) == Signal.NEUTRAL
        assert classify(60.0, 50.0, 0.0) == Signal.NEUTRAL

    def test_always_one_of_five(self):
        for rsi in range(10, 91, 5):
            for stoch in range(5, 96, 5):
                for trend in (-1.0, 0.0, 1.0):
                    assert classify(float(rsi), float(stoch), trend) in set(Signal)


class TestComputeTrend:
    """Tests for compute_trend()."""

    def test_uses_tenth_most_recent_point(self):
        points = tuple(PricePoint(i, float(i)) for i in range(40))
        buf = HistoryBuffer(capacity=40, points=points)
        # history[40 - 10] = 30.0
        assert compute_trend(buf, 39.0) == 9.0

    def test_short_history_raises(self):
        buf = HistoryBuffer(capacity=40, points=tuple(PricePoint(i, 1.0) for i in range(5)))
        with pytest.raises(ValueError, match="need at least"):
            compute_trend(buf, 1.0)

    def test_exact_lookback_length(self):
        buf = HistoryBuffer(capacity=10, points=tuple(PricePoint(i, float(i)) for i in range(10)))
        assert compute_trend(buf, 9.0) == 9.0
