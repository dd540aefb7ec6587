"""Market data models."""

from core.models.market import (
    BasePrice,
    DirectionType,
    HistoryBuffer,
    InstrumentState,
    PricePoint,
    SessionStatus,
    Signal,
    Snapshot,
    Timeframe,
    format_price,
    price_precision,
)
from core.models.config import FALLBACK_PRICES, SimulationConfig

__all__ = [
    "BasePrice",
    "DirectionType",
    "HistoryBuffer",
    "InstrumentState",
    "PricePoint",
    "SessionStatus",
    "Signal",
    "Snapshot",
    "Timeframe",
    "format_price",
    "price_precision",
    "FALLBACK_PRICES",
    "SimulationConfig",
]
