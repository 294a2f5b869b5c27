from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, timezone
from pathlib import Path

from stat_agent.collectors.errors import FatalCollectorError
from stat_agent.collectors.probe import probe_connectivity
from stat_agent.collectors.procfs import (
    InterfaceFilter,
    read_interface_counters,
    read_load_averages,
    read_memory_info,
    read_uptime_seconds,
)
from stat_agent.collectors.tools import read_disk_usage, read_vnstat_traffic
from stat_agent.config import Settings
from stat_agent.engine.state import CpuPercentState, NetSpeedState
from stat_agent.models.snapshot import Snapshot, TrafficSource

logger = logging.getLogger(__name__)


def traffic_source(settings: Settings) -> TrafficSource:
    return TrafficSource.VNSTAT if settings.vnstat else TrafficSource.KERNEL


def sample(
    settings: Settings,
    cpu_state: CpuPercentState,
    net_state: NetSpeedState,
    out: Snapshot | None = None,
    today: date | None = None,
) -> Snapshot:
    """Populate a snapshot from the synchronous collectors and the rate states.

    Soft-fail collectors contribute zeros when their source is unavailable.
    Memory info and vnstat traffic raise ``FatalCollectorError`` unless
    ``settings.fatal_policy`` is ``"degrade"``.
    """
    stat = out if out is not None else Snapshot()
    proc = Path(settings.proc_root)
    iface_filter = InterfaceFilter(settings.iface_ignore)

    stat.timestamp = datetime.now(timezone.utc)
    stat.version = settings.version
    stat.vnstat = settings.vnstat

    stat.uptime = read_uptime_seconds(proc / "uptime")
    stat.load_1, stat.load_5, stat.load_15 = read_load_averages(proc / "loadavg")

    mem_total, mem_used, swap_total, swap_free = _fatal_or_zeros(
        settings, read_memory_info, proc / "meminfo", zeros=4,
    )
    stat.memory_total = mem_total
    stat.memory_used = mem_used
    stat.swap_total = swap_total
    stat.swap_used = swap_total - swap_free

    stat.hdd_total, stat.hdd_used = read_disk_usage(
        settings.df_path, settings.disk_fs_types, settings.tool_timeout,
    )

    source = traffic_source(settings)
    if source is TrafficSource.VNSTAT:
        network_in, network_out, m_network_in, m_network_out = _fatal_or_zeros(
            settings, read_vnstat_traffic,
            settings.vnstat_path, iface_filter, settings.tool_timeout, today,
            zeros=4,
        )
        stat.network_in = network_in
        stat.network_out = network_out
        stat.last_network_in = network_in - m_network_in
        stat.last_network_out = network_out - m_network_out
    else:
        stat.network_in, stat.network_out = read_interface_counters(proc / "net" / "dev", iface_filter)
        stat.last_network_in = stat.last_network_out = 0

    if settings.probe_connectivity:
        stat.online4, stat.online6 = probe_connectivity(
            settings.probe_ipv4_host,
            settings.probe_ipv6_host,
            settings.probe_port,
            settings.probe_timeout,
        )
    else:
        stat.online4 = stat.online6 = False

    stat.cpu = cpu_state.read()
    speed = net_state.read()
    stat.network_rx = speed.rx_rate
    stat.network_tx = speed.tx_rate

    return stat


def _fatal_or_zeros(
    settings: Settings,
    collector: Callable[..., tuple[int, ...]],
    *args,
    zeros: int,
) -> tuple[int, ...]:
    try:
        return collector(*args)
    except FatalCollectorError as exc:
        if settings.fatal_policy != "degrade":
            raise
        logger.warning("%s degraded to zeros: %s", collector.__name__, exc)
        return (0,) * zeros
