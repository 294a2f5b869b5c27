from __future__ import annotations

from collections.abc import Sequence

IDLE = 3  # index of the idle bucket in a user/nice/system/idle vector


def compute_cpu_percent(previous: Sequence[int], current: Sequence[int]) -> float:
    """Busy percentage between two user/nice/system/idle counter vectors."""
    total_delta = sum(current) - sum(previous)
    if total_delta <= 0:
        total_delta = 1  # no ticks elapsed, or the counters were reset
    idle_delta = current[IDLE] - previous[IDLE]
    busy = round(100.0 - 100.0 * idle_delta / total_delta)
    return float(min(100, max(0, busy)))


def compute_rate(previous: int, current: int, elapsed: float) -> int:
    """Per-second rate of a cumulative counter, truncated to an integer."""
    if elapsed <= 0:
        return 0
    delta = current - previous
    if delta < 0:
        # wrapped or reset
        return 0
    return int(delta / elapsed)
