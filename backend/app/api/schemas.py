"""API request/response models."""

from typing import Optional

from pydantic import BaseModel

from core.models import (
    InstrumentState,
    PricePoint,
    Snapshot,
    Timeframe,
    price_precision,
)
from core.view_window import ViewWindow


class PricePointResponse(BaseModel):
    """One history point."""

    timestamp: int
    value: float


class InstrumentResponse(BaseModel):
    """Instrument state response model."""

    symbol: str
    current_price: float
    change_percent: float
    rsi: float
    stochastic: float
    signal: str
    direction: Optional[str] = None
    price_precision: int
    last_updated: int
    history: list[PricePointResponse]


class SnapshotResponse(BaseModel):
    """Full market snapshot."""

    tick: int
    created_at: int
    instruments: list[InstrumentResponse]


class SystemStatus(BaseModel):
    """System status response."""

    status: str
    version: str
    rate_synchronized: bool
    is_running: bool
    is_paused: bool
    tick: int
    symbols: list[str]
    timeframes: list[str]
    default_timeframe: str
    analysis_configured: bool
    delivery_configured: bool
    connections: int


class SimulationState(BaseModel):
    """Result of pause/resume."""

    is_running: bool
    is_paused: bool
    tick: int


class ChartResponse(BaseModel):
    """Chart window and its visible points."""

    symbol: str
    view_size: int
    view_offset: int
    is_live: bool
    points: list[PricePointResponse]


class AnalysisResponse(BaseModel):
    """Analysis text for one instrument."""

    symbol: str
    timeframe: str
    signal: str
    text: str
    available: bool


class DeliveryRequest(BaseModel):
    """Signal delivery request. Omitted timeframe uses the configured default."""

    timeframe: Optional[Timeframe] = None
    analysis: Optional[str] = None


class DeliveryResponse(BaseModel):
    """Signal delivery result."""

    success: bool
    message: str


class DeliverySettingsPayload(BaseModel):
    """Delivery destination settings."""

    chat_id: str = ""


def point_to_response(point: PricePoint) -> PricePointResponse:
    return PricePointResponse(timestamp=point.timestamp, value=point.value)


def instrument_to_response(state: InstrumentState) -> InstrumentResponse:
    return InstrumentResponse(
        symbol=state.symbol,
        current_price=state.current_price,
        change_percent=state.change_percent,
        rsi=state.rsi,
        stochastic=state.stochastic,
        signal=state.signal.value,
        direction=state.direction,
        price_precision=price_precision(state.symbol),
        last_updated=state.last_updated,
        history=[point_to_response(p) for p in state.history],
    )


def snapshot_to_response(snapshot: Snapshot) -> SnapshotResponse:
    return SnapshotResponse(
        tick=snapshot.tick,
        created_at=snapshot.created_at,
        instruments=[instrument_to_response(s) for s in snapshot],
    )


def chart_to_response(state: InstrumentState, window: ViewWindow) -> ChartResponse:
    return ChartResponse(
        symbol=state.symbol,
        view_size=window.view_size,
        view_offset=window.view_offset,
        is_live=window.is_live,
        points=[point_to_response(p) for p in window.apply(state.history)],
    )
