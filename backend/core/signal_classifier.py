"""Signal classification from synthetic indicators and short-term trend."""

from __future__ import annotations

from core.models.market import HistoryBuffer, Signal


# Oscillator thresholds
STRONG_BUY_RSI = 30.0
STRONG_BUY_STOCH = 20.0
STRONG_SELL_RSI = 70.0
STRONG_SELL_STOCH = 80.0
BUY_RSI = 45.0
SELL_RSI = 55.0


def classify(rsi: float, stochastic: float, trend: float) -> Signal:
    """Map indicators and trend to a discrete signal.

    Rules are checked in priority order, first match wins:
    1. rsi < 30 and stochastic < 20  -> STRONG_BUY
    2. rsi > 70 and stochastic > 80  -> STRONG_SELL
    3. rsi < 45 and trend > 0        -> BUY
    4. rsi > 55 and trend < 0        -> SELL
    5. otherwise                     -> NEUTRAL
    """
    if rsi < STRONG_BUY_RSI and stochastic < STRONG_BUY_STOCH:
        return Signal.STRONG_BUY
    if rsi > STRONG_SELL_RSI and stochastic > STRONG_SELL_STOCH:
        return Signal.STRONG_SELL
    if rsi < BUY_RSI and trend > 0:
        return Signal.BUY
    if rsi > SELL_RSI and trend < 0:
        return Signal.SELL
    return Signal.NEUTRAL


def compute_trend(history: HistoryBuffer, current_price: float, lookback: int = 10) -> float:
    """Price delta against the ``lookback``-th most recent point.

    ``history`` must already contain the newest point, so with the default
    lookback the reference is ``history[len - 10]``.
    """
    if lookback <= 0:
        raise ValueError(f"lookback must be > 0, got {lookback}")
    if len(history) < lookback:
        raise ValueError(
            f"history has {len(history)} points, need at least {lookback} for trend"
        )
    return current_price - history[len(history) - lookback].value
