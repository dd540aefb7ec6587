"""REST API routes.

Symbols contain '/' and spaces ("EUR/USD OTC"), so path parameters accept a
compact form: "EURUSD", "eurusd-otc" and "EUR_USD_OTC" all resolve to
"EUR/USD OTC".
"""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from app.api.websocket import manager
from app.api.schemas import (
    AnalysisResponse,
    ChartResponse,
    DeliveryRequest,
    DeliveryResponse,
    DeliverySettingsPayload,
    InstrumentResponse,
    SimulationState,
    SnapshotResponse,
    SystemStatus,
    chart_to_response,
    instrument_to_response,
    snapshot_to_response,
)
from app.config import VERSION, get_settings
from app.runtime import MarketRuntime
from app.services.chart_views import ACTIONS
from app.storage import DeliverySettings
from core.models import InstrumentState, Snapshot, Timeframe

logger = logging.getLogger(__name__)

router = APIRouter()


def normalize_symbol(symbol: str) -> str:
    """Uppercase alphanumeric key of a symbol ("EUR/USD OTC" -> "EURUSDOTC")."""
    return re.sub(r"[^A-Z0-9]", "", symbol.upper())


def resolve_symbol(snapshot: Snapshot, symbol: str) -> InstrumentState:
    """Find an instrument by exact or compact symbol.

    Raises:
        HTTPException: 404 if the symbol is not tracked
    """
    state = snapshot.get(symbol)
    if state is not None:
        return state

    key = normalize_symbol(symbol)
    for candidate in snapshot:
        full = normalize_symbol(candidate.symbol)
        if key == full or (full.endswith("OTC") and key == full[:-3]):
            return candidate
    raise HTTPException(status_code=404, detail=f"Symbol {symbol} not tracked")


# Dependency for the session runtime
def get_runtime(request: Request) -> MarketRuntime:
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise HTTPException(status_code=503, detail="Market session not initialized")
    return runtime


def _simulation_state(runtime: MarketRuntime) -> SimulationState:
    return SimulationState(
        is_running=runtime.loop.is_running,
        is_paused=runtime.loop.is_paused,
        tick=runtime.loop.snapshot.tick,
    )


@router.get("/status", response_model=SystemStatus)
async def get_status(runtime: MarketRuntime = Depends(get_runtime)):
    """Get system status."""
    settings = get_settings()
    snapshot = runtime.loop.snapshot
    return SystemStatus(
        status=runtime.bootstrap.status.value,
        version=VERSION,
        rate_synchronized=runtime.bootstrap.rate_synchronized,
        is_running=runtime.loop.is_running,
        is_paused=runtime.loop.is_paused,
        tick=snapshot.tick,
        symbols=snapshot.symbols,
        timeframes=[tf.value for tf in Timeframe],
        default_timeframe=settings.default_timeframe.value,
        analysis_configured=runtime.analyst.is_configured,
        delivery_configured=runtime.dispatcher.is_configured,
        connections=manager.connection_count,
    )


@router.get("/market", response_model=SnapshotResponse)
async def get_market(runtime: MarketRuntime = Depends(get_runtime)):
    """Get the latest market snapshot."""
    return snapshot_to_response(runtime.loop.snapshot)


@router.get("/market/{symbol}", response_model=InstrumentResponse)
async def get_instrument(symbol: str, runtime: MarketRuntime = Depends(get_runtime)):
    """Get one instrument from the latest snapshot."""
    return instrument_to_response(resolve_symbol(runtime.loop.snapshot, symbol))


@router.post("/simulation/pause", response_model=SimulationState)
async def pause_simulation(runtime: MarketRuntime = Depends(get_runtime)):
    """Pause the simulation loop."""
    runtime.loop.pause()
    state = _simulation_state(runtime)
    await manager.send_status(state.model_dump())
    return state


@router.post("/simulation/resume", response_model=SimulationState)
async def resume_simulation(runtime: MarketRuntime = Depends(get_runtime)):
    """Resume the simulation loop."""
    runtime.loop.resume()
    state = _simulation_state(runtime)
    await manager.send_status(state.model_dump())
    return state


@router.get("/charts/{symbol}", response_model=ChartResponse)
async def get_chart(symbol: str, runtime: MarketRuntime = Depends(get_runtime)):
    """Get a chart card's window and visible points."""
    state = resolve_symbol(runtime.loop.snapshot, symbol)
    return chart_to_response(state, runtime.charts.get(state.symbol))


@router.post("/charts/{symbol}/{action}", response_model=ChartResponse)
async def update_chart(
    symbol: str,
    action: str,
    runtime: MarketRuntime = Depends(get_runtime),
):
    """
    Zoom or pan a chart card.

    Actions: zoom-in, zoom-out, pan-left, pan-right, reset.
    """
    if action not in ACTIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown chart action '{action}', expected one of {sorted(ACTIONS)}",
        )
    state = resolve_symbol(runtime.loop.snapshot, symbol)
    window = runtime.charts.apply(state.symbol, action)
    return chart_to_response(state, window)


@router.post("/market/{symbol}/analysis", response_model=AnalysisResponse)
async def analyze_instrument(
    symbol: str,
    timeframe: Optional[Timeframe] = Query(None, description="Expiry timeframe"),
    runtime: MarketRuntime = Depends(get_runtime),
):
    """Get a short text recommendation for an instrument."""
    timeframe = timeframe or get_settings().default_timeframe
    state = resolve_symbol(runtime.loop.snapshot, symbol)
    result = await runtime.analyst.analyze(state, timeframe)
    return AnalysisResponse(
        symbol=state.symbol,
        timeframe=timeframe.value,
        signal=state.signal.value,
        text=result.text,
        available=result.available,
    )


@router.post("/market/{symbol}/deliver", response_model=DeliveryResponse)
async def deliver_signal(
    symbol: str,
    body: DeliveryRequest,
    runtime: MarketRuntime = Depends(get_runtime),
):
    """
    Send the instrument's current signal to the configured chat.

    Returns success=False (HTTP 200) when delivery is not configured or fails.
    """
    state = resolve_symbol(runtime.loop.snapshot, symbol)
    destination = runtime.delivery_store.load().chat_id
    result = await runtime.dispatcher.deliver(
        destination,
        state,
        body.timeframe or get_settings().default_timeframe,
        body.analysis,
    )
    return DeliveryResponse(success=result.success, message=result.message)


@router.get("/settings/delivery", response_model=DeliverySettingsPayload)
async def get_delivery_settings(runtime: MarketRuntime = Depends(get_runtime)):
    """Get the stored delivery destination."""
    return DeliverySettingsPayload(chat_id=runtime.delivery_store.load().chat_id)


@router.put("/settings/delivery", response_model=DeliverySettingsPayload)
async def update_delivery_settings(
    payload: DeliverySettingsPayload,
    runtime: MarketRuntime = Depends(get_runtime),
):
    """Store the delivery destination."""
    settings = DeliverySettings(chat_id=payload.chat_id)
    try:
        runtime.delivery_store.save(settings)
    except OSError as e:
        logger.error(f"Failed to save delivery settings: {e}")
        raise HTTPException(status_code=500, detail=f"Could not save settings: {e}")
    return DeliverySettingsPayload(chat_id=settings.chat_id)
