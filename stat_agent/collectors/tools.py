"""Adapters around the external ``df`` and ``vnstat`` tools."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Sequence
from datetime import date
from typing import Any

from stat_agent.collectors.errors import TrafficAccountingError
from stat_agent.collectors.procfs import InterfaceFilter

logger = logging.getLogger(__name__)


def run_tool(argv: Sequence[str], timeout: float) -> str | None:
    """Run ``argv`` and return its stdout, or ``None`` if it could not run."""
    try:
        result = subprocess.run(
            list(argv),
            check=False,
            text=True,
            capture_output=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        logger.debug("%s not found", argv[0])
        return None
    except subprocess.TimeoutExpired:
        logger.debug("%s timed out after %.1fs", argv[0], timeout)
        return None
    except OSError as exc:
        logger.debug("%s failed: %s", argv[0], exc)
        return None
    return result.stdout


# ── disk usage ───────────────────────────────────────


def disk_usage_command(df_path: str, fs_types: Sequence[str]) -> list[str]:
    argv = [df_path, "-Tlm", "--total"]
    for fs_type in fs_types:
        argv += ["-t", fs_type]
    return argv


def parse_disk_usage(output: str) -> tuple[int, int]:
    """Return ``(total_mb, used_mb)`` from the ``total`` row of ``df -Tm``.

    The row reads ``total - <size> <used> <avail> <use%> -``.
    """
    lines = output.strip().splitlines()
    if not lines:
        return (0, 0)
    fields = lines[-1].split()
    try:
        return (int(fields[2]), int(fields[3]))
    except (IndexError, ValueError):
        return (0, 0)


def read_disk_usage(df_path: str, fs_types: Sequence[str], timeout: float = 5.0) -> tuple[int, int]:
    output = run_tool(disk_usage_command(df_path, fs_types), timeout)
    if output is None:
        return (0, 0)
    return parse_disk_usage(output)


# ── vnstat ───────────────────────────────────────────


def parse_vnstat_traffic(
    data: dict[str, Any],
    iface_filter: InterfaceFilter,
    today: date,
) -> tuple[int, int, int, int]:
    """Return ``(rx_total, tx_total, rx_month, tx_month)`` from ``vnstat --json m``.

    Raises:
        TrafficAccountingError: the document lacks the expected structure.
    """
    rx_total = tx_total = rx_month = tx_month = 0
    try:
        for iface in data["interfaces"]:
            if iface_filter.excludes(iface["name"]):
                continue
            traffic = iface["traffic"]
            rx_total += int(traffic["total"]["rx"])
            tx_total += int(traffic["total"]["tx"])

            for entry in traffic["month"]:
                when = entry["date"]
                if int(when["year"]) != today.year or int(when["month"]) != today.month:
                    continue
                rx_month += int(entry["rx"])
                tx_month += int(entry["tx"])
    except (KeyError, TypeError, ValueError) as exc:
        raise TrafficAccountingError(f"unexpected vnstat output: {exc!r}") from exc

    return rx_total, tx_total, rx_month, tx_month


def read_vnstat_traffic(
    vnstat_path: str,
    iface_filter: InterfaceFilter,
    timeout: float = 5.0,
    today: date | None = None,
) -> tuple[int, int, int, int]:
    output = run_tool([vnstat_path, "--json", "m"], timeout)
    if output is None:
        raise TrafficAccountingError(f"failed to execute {vnstat_path}")
    try:
        data = json.loads(output)
    except json.JSONDecodeError as exc:
        raise TrafficAccountingError(f"{vnstat_path} produced invalid JSON") from exc
    if not isinstance(data, dict):
        raise TrafficAccountingError(f"{vnstat_path} produced a non-object document")
    return parse_vnstat_traffic(data, iface_filter, today or date.today())
