"""Market state models for the simulated OTC feed.

These models are plain frozen dataclasses:
- float prices and Unix millisecond timestamps
- immutable values so a published Snapshot can never change under a reader
- HistoryBuffer.push() returns a new buffer instead of mutating in place
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Iterator, Literal


DirectionType = Literal["CALL", "PUT"]


class Signal(str, Enum):
    """Discrete trading signal."""

    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    NEUTRAL = "NEUTRAL"
    SELL = "SELL"
    STRONG_SELL = "STRONG_SELL"

    @property
    def is_bullish(self) -> bool:
        return self in (Signal.STRONG_BUY, Signal.BUY)

    @property
    def is_bearish(self) -> bool:
        return self in (Signal.STRONG_SELL, Signal.SELL)

    @property
    def direction(self) -> DirectionType | None:
        """Option direction for this signal (None when neutral)."""
        if self.is_bullish:
            return "CALL"
        if self.is_bearish:
            return "PUT"
        return None


class Timeframe(str, Enum):
    """Expiry timeframes a viewer can pick for a signal."""

    S5 = "5s"
    S15 = "15s"
    S30 = "30s"
    M1 = "1m"
    M3 = "3m"
    M5 = "5m"


class SessionStatus(str, Enum):
    """Where the session's base prices came from."""

    RATE_SYNCHRONIZED = "rate_synchronized"
    SIMULATED_ONLY = "simulated_only"


@dataclass(frozen=True, slots=True)
class PricePoint:
    """One history point."""

    timestamp: int  # Unix timestamp in milliseconds
    value: float


@dataclass(frozen=True, slots=True)
class BasePrice:
    """Starting price for one instrument."""

    symbol: str
    price: float


@dataclass(frozen=True, slots=True)
class HistoryBuffer:
    """Fixed-capacity, oldest-first price history.

    Once seeded the buffer always holds exactly ``capacity`` points.
    push() appends the new point and trims the oldest one.
    """

    capacity: int
    points: tuple[PricePoint, ...] = ()

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError(f"capacity must be > 0, got {self.capacity}")
        if len(self.points) > self.capacity:
            # Keep only the most recent points
            object.__setattr__(self, "points", tuple(self.points[-self.capacity:]))

    @classmethod
    def seeded(
        cls,
        price: float,
        capacity: int,
        now_ms: int,
        spacing_ms: int = 1000,
    ) -> HistoryBuffer:
        """Create a full buffer of ``capacity`` copies of ``price``.

        Timestamps are spaced ``spacing_ms`` apart and end at ``now_ms``.
        """
        points = tuple(
            PricePoint(timestamp=now_ms - (capacity - 1 - i) * spacing_ms, value=price)
            for i in range(capacity)
        )
        return cls(capacity=capacity, points=points)

    def push(self, point: PricePoint) -> HistoryBuffer:
        """Return a new buffer with ``point`` appended and the oldest evicted."""
        points = self.points + (point,)
        if len(points) > self.capacity:
            points = points[-self.capacity:]
        return HistoryBuffer(capacity=self.capacity, points=points)

    def values(self) -> list[float]:
        """Get list of point values."""
        return [p.value for p in self.points]

    @property
    def oldest(self) -> PricePoint:
        return self.points[0]

    @property
    def latest(self) -> PricePoint:
        return self.points[-1]

    @property
    def is_full(self) -> bool:
        return len(self.points) == self.capacity

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, index):
        return self.points[index]

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self.points)


@dataclass(frozen=True, slots=True)
class InstrumentState:
    """Simulated state of one tracked instrument."""

    symbol: str
    current_price: float
    history: HistoryBuffer
    change_percent: float = 0.0
    rsi: float = 50.0
    stochastic: float = 50.0
    signal: Signal = Signal.NEUTRAL
    last_updated: int = 0  # Unix timestamp in milliseconds

    @property
    def direction(self) -> DirectionType | None:
        return self.signal.direction

    def evolve(self, **changes) -> InstrumentState:
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Complete market state at one tick.

    Instruments keep their insertion order. A new Snapshot is built for
    every tick; existing ones are never modified.
    """

    instruments: tuple[InstrumentState, ...] = ()
    tick: int = 0
    created_at: int = 0  # Unix timestamp in milliseconds
    _index: dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, int] = {}
        for i, instrument in enumerate(self.instruments):
            if instrument.symbol in index:
                raise ValueError(f"Duplicate symbol in snapshot: {instrument.symbol}")
            index[instrument.symbol] = i
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_instruments(
        cls,
        instruments: Iterable[InstrumentState],
        tick: int = 0,
        created_at: int = 0,
    ) -> Snapshot:
        return cls(instruments=tuple(instruments), tick=tick, created_at=created_at)

    @property
    def symbols(self) -> list[str]:
        return [i.symbol for i in self.instruments]

    def get(self, symbol: str) -> InstrumentState | None:
        """Get an instrument by symbol, or None if not tracked."""
        idx = self._index.get(symbol)
        if idx is None:
            return None
        return self.instruments[idx]

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._index

    def __len__(self) -> int:
        return len(self.instruments)

    def __iter__(self) -> Iterator[InstrumentState]:
        return iter(self.instruments)


def price_precision(symbol: str) -> int:
    """Display decimals for a symbol: 2 for JPY-quoted pairs, 5 otherwise."""
    return 2 if "JPY" in symbol else 5


def format_price(symbol: str, price: float) -> str:
    return f"{price:.{price_precision(symbol)}f}"
