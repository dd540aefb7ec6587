"""Session runtime: everything built once at startup and torn down at shutdown."""

import logging
from dataclasses import dataclass
from pathlib import Path

from app.clients import ExchangeRateClient, GeminiClient, TelegramClient
from app.config import Settings
from app.services import (
    ChartViews,
    MarketAnalyst,
    SessionBootstrap,
    SessionInitializer,
    SignalDispatcher,
    SimulationLoop,
)
from app.storage import DeliverySettingsStore
from core.market_simulator import MarketSimulator
from core.random_source import RandomSource, default_random_source

logger = logging.getLogger(__name__)


@dataclass
class MarketRuntime:
    """Live objects of one session."""

    bootstrap: SessionBootstrap
    loop: SimulationLoop
    charts: ChartViews
    analyst: MarketAnalyst
    dispatcher: SignalDispatcher
    delivery_store: DeliverySettingsStore

    async def close(self) -> None:
        """Stop the loop first, then release HTTP clients."""
        await self.loop.stop()
        for closer in (self.analyst.close, self.dispatcher.close):
            try:
                await closer()
            except Exception as e:
                logger.warning(f"Error closing client: {e}")


async def build_runtime(
    settings: Settings,
    rate_client: ExchangeRateClient | None = None,
    rng: RandomSource | None = None,
) -> MarketRuntime:
    """Bootstrap base prices and wire the session services (loop not started)."""
    initializer = SessionInitializer(
        rate_client or ExchangeRateClient(
            url=settings.rate_source_url,
            timeout=settings.rate_source_timeout,
        )
    )
    bootstrap = await initializer.initialize()

    config = settings.simulation_config()
    simulator = MarketSimulator(config, rng or default_random_source(settings.random_seed))
    loop = SimulationLoop(
        simulator,
        simulator.initial_snapshot(bootstrap.base_prices),
        interval=settings.tick_interval,
    )

    gemini = None
    if settings.gemini_api_key:
        gemini = GeminiClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.gemini_timeout,
        )
    telegram = None
    if settings.telegram_bot_token:
        telegram = TelegramClient(
            bot_token=settings.telegram_bot_token,
            timeout=settings.telegram_timeout,
        )

    return MarketRuntime(
        bootstrap=bootstrap,
        loop=loop,
        charts=ChartViews(capacity=config.history_capacity),
        analyst=MarketAnalyst(gemini),
        dispatcher=SignalDispatcher(telegram),
        delivery_store=DeliverySettingsStore(Path(settings.delivery_settings_path)),
    )
