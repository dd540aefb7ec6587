"""Periodic scheduler for the market simulation.

A single asyncio task calls MarketSimulator.step() every tick interval and
publishes the result by replacing one reference. Readers take
``loop.snapshot`` and get a complete, immutable Snapshot.

Snapshot callbacks (WebSocket broadcast) run as separate tasks, so a slow
consumer never delays the next tick.

- pause(): no new ticks are scheduled until resume(); missed ticks are
  not replayed
- stop(): cancels the pending timer and in-flight callbacks; no snapshot is
  published afterwards
"""

import asyncio
import logging
from typing import Awaitable, Callable

from core.market_simulator import MarketSimulator
from core.models import Snapshot

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[Snapshot], Awaitable[None]]


class SimulationLoop:
    """Drive MarketSimulator ticks on a fixed period."""

    def __init__(
        self,
        simulator: MarketSimulator,
        initial: Snapshot,
        interval: float = 0.5,
    ):
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self.simulator = simulator
        self.interval = interval
        self._snapshot = initial
        self._callbacks: list[SnapshotCallback] = []
        self._task: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()
        self._resumed = asyncio.Event()
        self._resumed.set()
        self._stopped = False

    @property
    def snapshot(self) -> Snapshot:
        """Latest published snapshot."""
        return self._snapshot

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def is_paused(self) -> bool:
        return not self._resumed.is_set()

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    def on_snapshot(self, callback: SnapshotCallback) -> None:
        """Register callback for every published snapshot."""
        self._callbacks.append(callback)

    async def start(self) -> None:
        """Start the periodic task."""
        if self._stopped:
            raise RuntimeError("Simulation loop has been stopped")
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(
            "Simulation loop started: %d instruments every %.0f ms",
            len(self._snapshot), self.interval * 1000,
        )

    def pause(self) -> None:
        """Suspend tick scheduling."""
        if not self.is_paused:
            self._resumed.clear()
            logger.info("Simulation paused at tick %d", self._snapshot.tick)

    def resume(self) -> None:
        """Resume tick scheduling."""
        if self.is_paused:
            self._resumed.set()
            logger.info("Simulation resumed at tick %d", self._snapshot.tick)

    async def stop(self) -> None:
        """Stop the loop for good."""
        self._stopped = True
        # Wake a paused loop so cancellation is delivered promptly
        self._resumed.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info("Simulation loop stopped at tick %d", self._snapshot.tick)

    async def tick(self) -> Snapshot:
        """Advance every instrument once and publish the new snapshot."""
        if self._stopped:
            return self._snapshot

        snapshot = self.simulator.step(self._snapshot)
        self._snapshot = snapshot
        self._notify(snapshot)
        return snapshot

    def _notify(self, snapshot: Snapshot) -> None:
        for callback in self._callbacks:
            task = asyncio.create_task(callback(snapshot))
            self._pending.add(task)
            task.add_done_callback(self._on_callback_done)

    def _on_callback_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Snapshot callback error: {error}")

    async def _run(self) -> None:
        clock = asyncio.get_running_loop()
        deadline = clock.time() + self.interval
        while not self._stopped:
            try:
                if self.is_paused:
                    await self._resumed.wait()
                    deadline = clock.time() + self.interval

                delay = deadline - clock.time()
                if delay > 0:
                    await asyncio.sleep(delay)
                # Paused or stopped while sleeping: skip this tick
                if self._stopped or self.is_paused:
                    continue

                await self.tick()
                # Missed deadlines are dropped, not replayed
                deadline = max(deadline + self.interval, clock.time())
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Simulation tick failed: {e}")
                deadline = clock.time() + self.interval
