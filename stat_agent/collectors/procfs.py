"""Parsers for the kernel counter files under ``/proc``.

The ``parse_*`` functions work on file contents and have no side effects;
the ``read_*`` functions open the file and apply the failure policy of
their collector (zeros for soft-fail collectors, an exception otherwise).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from stat_agent.collectors.errors import RequiredFieldAbsent

logger = logging.getLogger(__name__)

DEFAULT_IFACE_IGNORE = ("lo", "docker", "vnet", "veth", "vmbr", "kube", "br-")

MEMINFO_RE = re.compile(r"^(?P<key>\S*):\s*(?P<value>\d+)\s*kB", re.MULTILINE)
NET_DEV_RE = re.compile(r"([^\s]+):\s*(\d+)" + r"\s+(\d+)" * 11)

MEMINFO_REQUIRED = ("MemTotal", "MemFree", "Buffers", "Cached", "SReclaimable", "SwapTotal", "SwapFree")

# position of rx bytes / tx bytes among the numeric columns of /proc/net/dev
RX_BYTES = 0
TX_BYTES = 8

CPU_FIELDS = 4  # user, nice, system, idle


class InterfaceFilter:
    """Substring patterns naming virtual and loopback interfaces."""

    __slots__ = ("patterns",)

    def __init__(self, patterns: Iterable[str] = DEFAULT_IFACE_IGNORE) -> None:
        self.patterns: frozenset[str] = frozenset(patterns)

    def excludes(self, name: str) -> bool:
        return any(pattern in name for pattern in self.patterns)

    def __repr__(self) -> str:
        return f"InterfaceFilter({sorted(self.patterns)!r})"


# ── uptime / load ────────────────────────────────────


def parse_uptime(text: str) -> int:
    try:
        return int(text.split(".", 1)[0].strip())
    except ValueError:
        return 0


def read_uptime_seconds(path: str | Path) -> int:
    try:
        return parse_uptime(Path(path).read_text())
    except OSError:
        logger.debug("Cannot read uptime source: %s", path)
        return 0


def parse_loadavg(text: str) -> tuple[float, float, float]:
    fields = text.split()
    if len(fields) < 3:
        return (0.0, 0.0, 0.0)
    try:
        return (float(fields[0]), float(fields[1]), float(fields[2]))
    except ValueError:
        return (0.0, 0.0, 0.0)


def read_load_averages(path: str | Path) -> tuple[float, float, float]:
    try:
        return parse_loadavg(Path(path).read_text())
    except OSError:
        logger.debug("Cannot read load average source: %s", path)
        return (0.0, 0.0, 0.0)


# ── memory ───────────────────────────────────────────


def parse_meminfo(text: str) -> dict[str, int]:
    return {m["key"]: int(m["value"]) for m in MEMINFO_RE.finditer(text)}


def memory_usage(table: dict[str, int], source: str = "") -> tuple[int, int, int, int]:
    """Return ``(total, used, swap_total, swap_free)`` in kB.

    Raises:
        RequiredFieldAbsent: the table lacks one of ``MEMINFO_REQUIRED``.
    """
    for key in MEMINFO_REQUIRED:
        if key not in table:
            raise RequiredFieldAbsent(key, source)

    total = table["MemTotal"]
    used = total - table["MemFree"] - table["Buffers"] - table["Cached"] - table["SReclaimable"]
    return (total, used, table["SwapTotal"], table["SwapFree"])


def read_memory_info(path: str | Path) -> tuple[int, int, int, int]:
    try:
        text = Path(path).read_text()
    except OSError as exc:
        raise RequiredFieldAbsent("MemTotal", str(path)) from exc
    return memory_usage(parse_meminfo(text), str(path))


# ── network ──────────────────────────────────────────


def sum_interface_counters(text: str, iface_filter: InterfaceFilter) -> tuple[int, int]:
    """Sum rx/tx bytes over every interface line the filter lets through."""
    rx_total = tx_total = 0
    for line in text.splitlines():
        m = NET_DEV_RE.search(line)
        if m is None:
            continue
        if iface_filter.excludes(m.group(1)):
            continue
        counters = m.groups()[1:]
        rx_total += int(counters[RX_BYTES])
        tx_total += int(counters[TX_BYTES])
    return rx_total, tx_total


def read_interface_counters(path: str | Path, iface_filter: InterfaceFilter) -> tuple[int, int]:
    try:
        text = Path(path).read_text()
    except OSError:
        logger.debug("Cannot read interface counters: %s", path)
        return (0, 0)
    return sum_interface_counters(text, iface_filter)


# ── cpu ──────────────────────────────────────────────


def parse_cpu_counters(text: str) -> list[int]:
    """Return the user/nice/system/idle jiffies of the aggregate ``cpu`` line.

    Raises ``ValueError`` when the first line carries fewer than four
    numeric fields.
    """
    first_line = text.split("\n", 1)[0]
    fields = first_line.split()[1:1 + CPU_FIELDS]
    if len(fields) < CPU_FIELDS:
        raise ValueError(f"short cpu line: {first_line!r}")
    return [int(v) for v in fields]


def read_cpu_counters(path: str | Path) -> list[int]:
    with open(path) as f:
        return parse_cpu_counters(f.readline())
