"""Latest derived rates, shared between a sampler and the assembler.

Each state has exactly one writer (its sampler) and any number of readers.
The lock only guards the in-memory swap, never the counter read that
precedes it.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass, replace

from stat_agent.collectors.procfs import CPU_FIELDS
from stat_agent.engine.rates import compute_cpu_percent, compute_rate


class CpuPercentState:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._percent = 0.0
        self._counters: list[int] = [0] * CPU_FIELDS
        self._computed_at = 0.0

    def update(self, counters: Sequence[int], now: float | None = None) -> float:
        """Publish the busy percentage since the previous counter vector."""
        current = list(counters)
        with self._lock:
            percent = compute_cpu_percent(self._counters, current)
            self._percent = percent
            self._counters = current
            self._computed_at = time.time() if now is None else now
        return percent

    def read(self) -> float:
        with self._lock:
            return self._percent

    @property
    def computed_at(self) -> float:
        with self._lock:
            return self._computed_at


@dataclass(slots=True, frozen=True)
class NetSpeed:
    """Network throughput plus the cumulative counters it was derived from."""

    rx_rate: int = 0  # bytes/s
    tx_rate: int = 0
    rx_total: int = 0
    tx_total: int = 0
    clock: float = 0.0  # wall-clock seconds of the last update
    elapsed: float = 0.0


class NetSpeedState:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._speed = NetSpeed()

    def update(self, rx_total: int, tx_total: int, now: float) -> NetSpeed:
        """Derive rx/tx rates against the stored totals and store the new ones.

        The clock starts at zero, so the first update yields a meaningless
        rate; consumers treat the first tick as warm-up.
        """
        with self._lock:
            prev = self._speed
            elapsed = now - prev.clock
            self._speed = replace(
                prev,
                rx_rate=compute_rate(prev.rx_total, rx_total, elapsed),
                tx_rate=compute_rate(prev.tx_total, tx_total, elapsed),
                rx_total=rx_total,
                tx_total=tx_total,
                clock=now,
                elapsed=elapsed,
            )
            return self._speed

    def read(self) -> NetSpeed:
        with self._lock:
            return self._speed
