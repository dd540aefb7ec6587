"""Shared fixtures: deterministic random sources and a wired test runtime."""

import pytest

from app.runtime import MarketRuntime
from app.services import (
    ChartViews,
    MarketAnalyst,
    SessionBootstrap,
    SignalDispatcher,
    SimulationLoop,
)
from app.storage import DeliverySettingsStore
from core.market_simulator import MarketSimulator
from core.models import FALLBACK_PRICES, SessionStatus, SimulationConfig


class MidpointRandom:
    """Random source that always returns the middle of the range."""

    def __init__(self):
        self.calls: list[tuple[float, float]] = []

    def uniform(self, a: float, b: float) -> float:
        self.calls.append((a, b))
        return (a + b) / 2


class ScriptedRandom:
    """Random source that replays a fixed sequence of values."""

    def __init__(self, values):
        self._values = list(values)
        self.calls: list[tuple[float, float]] = []

    def uniform(self, a: float, b: float) -> float:
        self.calls.append((a, b))
        if not self._values:
            raise AssertionError("ScriptedRandom exhausted")
        value = self._values.pop(0)
        assert min(a, b) <= value <= max(a, b), f"{value} outside [{a}, {b}]"
        return value


@pytest.fixture
def midpoint_rng():
    return MidpointRandom()


@pytest.fixture
def sim_config():
    return SimulationConfig()


@pytest.fixture
def runtime(tmp_path):
    """Runtime on fallback prices, no collaborators, loop not started."""
    simulator = MarketSimulator(SimulationConfig(), MidpointRandom())
    bootstrap = SessionBootstrap(list(FALLBACK_PRICES), SessionStatus.SIMULATED_ONLY, "offline")
    loop = SimulationLoop(
        simulator,
        simulator.initial_snapshot(bootstrap.base_prices, timestamp=1_700_000_000_000),
        interval=0.5,
    )
    return MarketRuntime(
        bootstrap=bootstrap,
        loop=loop,
        charts=ChartViews(capacity=40),
        analyst=MarketAnalyst(None),
        dispatcher=SignalDispatcher(None),
        delivery_store=DeliverySettingsStore(tmp_path / "delivery.yaml"),
    )


@pytest.fixture
def scripted_rng():
    """Factory: scripted_rng([1.0, 0.5, ...]) -> ScriptedRandom."""
    return ScriptedRandom
