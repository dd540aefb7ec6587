"""Business services."""

from app.services.session_initializer import (
    CROSS_RATES,
    CrossRate,
    SessionBootstrap,
    SessionInitializer,
    derive_base_prices,
)
from app.services.simulation_loop import SimulationLoop
from app.services.market_analyst import AnalysisResult, MarketAnalyst
from app.services.signal_dispatcher import DeliveryResult, SignalDispatcher
from app.services.chart_views import ChartViews

__all__ = [
    "CROSS_RATES",
    "CrossRate",
    "SessionBootstrap",
    "SessionInitializer",
    "derive_base_prices",
    "SimulationLoop",
    "AnalysisResult",
    "MarketAnalyst",
    "DeliveryResult",
    "SignalDispatcher",
    "ChartViews",
]
