from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any

from stat_agent.collectors.procfs import InterfaceFilter, read_cpu_counters, sum_interface_counters
from stat_agent.engine.state import CpuPercentState, NetSpeedState

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class BaseSampler(ABC):
    """Abstract base for the background rate samplers.

    Subclasses implement ``read()``, a blocking counter read run in a worker
    thread, and ``update()``, which publishes into the sampler's state.
    The base class handles the async loop, interval timing, and graceful
    shutdown.
    """

    name: str = "base"
    interval: float = 1.0  # seconds between ticks

    def __init__(self, interval: float | None = None, clock: Clock = time.time) -> None:
        if interval is not None:
            self.interval = interval
        self._clock = clock
        self._running = False
        self._task: asyncio.Task | None = None
        self.ticks = 0
        self.skipped = 0

    # ── lifecycle ────────────────────────────────────────

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(), name=self.name)
        logger.info("Sampler [%s] started (interval=%.1fs)", self.name, self.interval)

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Sampler [%s] stopped", self.name)

    # ── abstract methods ────────────────────────────────

    @abstractmethod
    def read(self) -> Any:
        """Read the raw counters. May block; runs off the event loop."""
        ...

    @abstractmethod
    def update(self, raw: Any, now: float) -> None:
        """Derive the rate from ``raw`` and publish it."""
        ...

    # ── tick ─────────────────────────────────────────────

    async def sample_once(self) -> bool:
        """Run one tick. Returns False when the read failed and was skipped."""
        try:
            raw = await asyncio.to_thread(self.read)
        except (OSError, ValueError):
            self.skipped += 1
            logger.debug("Sampler [%s] skipped a tick", self.name, exc_info=True)
            return False
        self.update(raw, self._clock())
        self.ticks += 1
        return True

    # ── internals ───────────────────────────────────────

    async def _loop(self) -> None:
        while self._running:
            try:
                await self.sample_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Sampler [%s] error during tick", self.name)
            await asyncio.sleep(self.interval)

    @property
    def running(self) -> bool:
        return self._running


class CpuSampler(BaseSampler):
    """Publishes the CPU busy percentage from consecutive ``/proc/stat`` reads."""

    name = "cpu_sampler"

    def __init__(
        self,
        state: CpuPercentState,
        stat_path: str | Path = "/proc/stat",
        interval: float | None = None,
        clock: Clock = time.time,
    ) -> None:
        super().__init__(interval=interval, clock=clock)
        self.state = state
        self.stat_path = Path(stat_path)

    def read(self) -> list[int]:
        return read_cpu_counters(self.stat_path)

    def update(self, raw: list[int], now: float) -> None:
        self.state.update(raw, now)


class NetSpeedSampler(BaseSampler):
    """Publishes rx/tx throughput from consecutive ``/proc/net/dev`` reads."""

    name = "net_speed_sampler"

    def __init__(
        self,
        state: NetSpeedState,
        dev_path: str | Path = "/proc/net/dev",
        iface_filter: InterfaceFilter | None = None,
        interval: float | None = None,
        clock: Clock = time.time,
    ) -> None:
        super().__init__(interval=interval, clock=clock)
        self.state = state
        self.dev_path = Path(dev_path)
        self.iface_filter = iface_filter or InterfaceFilter()

    def read(self) -> tuple[int, int]:
        return sum_interface_counters(self.dev_path.read_text(), self.iface_filter)

    def update(self, raw: tuple[int, int], now: float) -> None:
        rx_total, tx_total = raw
        self.state.update(rx_total, tx_total, now)
