from __future__ import annotations

from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, Field


class TrafficSource(StrEnum):
    KERNEL = "kernel"
    VNSTAT = "vnstat"


class Snapshot(BaseModel):
    """Point-in-time host status record handed to the transport layer.

    Sizes are in the units of their sources: memory and swap in kB, disk in
    MB, network totals in bytes and network rates in bytes per second.
    """

    version: str = ""
    vnstat: bool = False

    uptime: int = 0
    load_1: float = 0.0
    load_5: float = 0.0
    load_15: float = 0.0

    memory_total: int = 0
    memory_used: int = 0
    swap_total: int = 0
    swap_used: int = 0

    hdd_total: int = 0
    hdd_used: int = 0

    network_in: int = 0
    network_out: int = 0
    last_network_in: int = 0  # only meaningful in vnstat mode
    last_network_out: int = 0

    cpu: float = 0.0  # 0 - 100, rounded
    network_rx: int = 0
    network_tx: int = 0

    online4: bool = False
    online6: bool = False

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
