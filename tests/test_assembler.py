"""Tests for stat_agent.engine.assembler: snapshot assembly end to end."""

from __future__ import annotations

import textwrap
from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from stat_agent.collectors.errors import RequiredFieldAbsent, TrafficAccountingError
from stat_agent.config import Settings
from stat_agent.engine.assembler import sample, traffic_source
from stat_agent.engine.state import CpuPercentState, NetSpeedState
from stat_agent.models.snapshot import Snapshot, TrafficSource

MEMINFO = textwrap.dedent("""\
    MemTotal:           1000 kB
    MemFree:             200 kB
    Buffers:              50 kB
    Cached:               50 kB
    SReclaimable:        100 kB
    SwapTotal:           500 kB
    SwapFree:            500 kB
""")

NET_DEV = (
    "Inter-|   Receive |  Transmit\n"
    " face |bytes packets|bytes packets\n"
    "    lo: 777 1 0 0 0 0 0 0 777 1 0 0 0 0 0 0\n"
    "  eth0: 5000 1 0 0 0 0 0 0 3000 1 0 0 0 0 0 0\n"
    "docker0: 888 1 0 0 0 0 0 0 888 1 0 0 0 0 0 0\n"
)


@pytest.fixture
def proc(tmp_path):
    """A /proc-shaped directory with known counter values."""
    (tmp_path / "net").mkdir()
    (tmp_path / "uptime").write_text("12345.67 8900.11\n")
    (tmp_path / "loadavg").write_text("0.50 0.30 0.10 1/200 1234\n")
    (tmp_path / "meminfo").write_text(MEMINFO)
    (tmp_path / "net" / "dev").write_text(NET_DEV)
    return tmp_path


@pytest.fixture
def states():
    return CpuPercentState(), NetSpeedState()


@pytest.fixture(autouse=True)
def _fixed_disk():
    with patch("stat_agent.engine.assembler.read_disk_usage", return_value=(40_000, 12_000)) as m:
        yield m


def _settings(proc, **overrides) -> Settings:
    return Settings(proc_root=str(proc), version="9.9.9", **overrides)


# ── plain-counter mode ────────────────────────────────


class TestKernelMode:
    def test_end_to_end_values(self, proc, states):
        stat = sample(_settings(proc), *states)

        assert stat.version == "9.9.9"
        assert stat.vnstat is False
        assert stat.uptime == 12345
        assert (stat.load_1, stat.load_5, stat.load_15) == (0.50, 0.30, 0.10)
        assert stat.memory_total == 1000
        assert stat.memory_used == 600
        assert stat.swap_total == 500
        assert stat.swap_used == 0
        assert (stat.hdd_total, stat.hdd_used) == (40_000, 12_000)
        assert (stat.network_in, stat.network_out) == (5000, 3000)
        assert (stat.last_network_in, stat.last_network_out) == (0, 0)

    def test_warm_up_rates_are_zero(self, proc, states):
        stat = sample(_settings(proc), *states)
        assert stat.cpu == 0
        assert (stat.network_rx, stat.network_tx) == (0, 0)

    def test_copies_published_rates(self, proc, states):
        cpu_state, net_state = states
        cpu_state.update([10, 0, 10, 20], now=1.0)
        net_state.update(1_000, 1_000, now=10.0)
        net_state.update(3_000, 2_000, now=11.0)

        stat = sample(_settings(proc), cpu_state, net_state)

        assert stat.cpu == 50
        assert stat.network_rx == 2_000
        assert stat.network_tx == 1_000

    def test_soft_fail_sources_degrade_to_zero(self, tmp_path, states):
        (tmp_path / "meminfo").write_text(MEMINFO)
        stat = sample(_settings(tmp_path), *states)

        assert stat.uptime == 0
        assert (stat.load_1, stat.load_5, stat.load_15) == (0.0, 0.0, 0.0)
        assert (stat.network_in, stat.network_out) == (0, 0)
        assert stat.memory_total == 1000

    def test_populates_given_record(self, proc, states):
        out = Snapshot()
        stat = sample(_settings(proc), *states, out=out)
        assert stat is out
        assert out.uptime == 12345

    def test_reused_record_is_fully_refreshed(self, proc, states):
        stale_at = datetime.now(timezone.utc) - timedelta(hours=1)
        out = Snapshot(
            timestamp=stale_at,
            online4=True,
            online6=True,
            last_network_in=999,
            last_network_out=888,
        )
        stat = sample(_settings(proc), *states, out=out)

        assert stat is out
        assert stat.timestamp > stale_at
        assert (stat.online4, stat.online6) == (False, False)
        assert (stat.last_network_in, stat.last_network_out) == (0, 0)

    def test_probe_disabled_by_default(self, proc, states):
        with patch("stat_agent.engine.assembler.probe_connectivity") as probe:
            stat = sample(_settings(proc), *states)
        probe.assert_not_called()
        assert (stat.online4, stat.online6) == (False, False)

    def test_probe_enabled(self, proc, states):
        with patch("stat_agent.engine.assembler.probe_connectivity", return_value=(True, False)) as probe:
            stat = sample(_settings(proc, probe_connectivity=True, probe_timeout=0.5), *states)
        probe.assert_called_once_with("ipv4.google.com", "ipv6.google.com", 80, 0.5)
        assert (stat.online4, stat.online6) == (True, False)


# ── memory failure policy ─────────────────────────────


class TestMemoryPolicy:
    def test_missing_key_is_fatal(self, proc, states):
        (proc / "meminfo").write_text(MEMINFO.replace("SReclaimable", "Shmem"))
        with pytest.raises(RequiredFieldAbsent) as exc_info:
            sample(_settings(proc), *states)
        assert exc_info.value.field == "SReclaimable"

    def test_missing_key_degrades_when_configured(self, proc, states):
        (proc / "meminfo").write_text("MemTotal: 1000 kB\n")
        stat = sample(_settings(proc, fatal_policy="degrade"), *states)
        assert (stat.memory_total, stat.memory_used, stat.swap_total, stat.swap_used) == (0, 0, 0, 0)
        assert stat.uptime == 12345


# ── traffic-accounting mode ───────────────────────────


class TestVnstatMode:
    def test_traffic_source_choice(self, proc):
        assert traffic_source(_settings(proc)) is TrafficSource.KERNEL
        assert traffic_source(_settings(proc, vnstat=True)) is TrafficSource.VNSTAT

    def test_last_period_is_total_minus_month(self, proc, states):
        with patch(
            "stat_agent.engine.assembler.read_vnstat_traffic",
            return_value=(12_000, 6_000, 2_000, 1_000),
        ) as vnstat, patch("stat_agent.engine.assembler.read_interface_counters") as kernel:
            stat = sample(_settings(proc, vnstat=True), *states, today=date(2024, 5, 1))

        kernel.assert_not_called()
        args = vnstat.call_args.args
        assert args[0] == "/usr/bin/vnstat"
        assert args[-1] == date(2024, 5, 1)
        assert stat.vnstat is True
        assert (stat.network_in, stat.network_out) == (12_000, 6_000)
        assert (stat.last_network_in, stat.last_network_out) == (10_000, 5_000)

    def test_kernel_mode_skips_vnstat(self, proc, states):
        with patch("stat_agent.engine.assembler.read_vnstat_traffic") as vnstat:
            sample(_settings(proc), *states)
        vnstat.assert_not_called()

    def test_vnstat_failure_is_fatal(self, proc, states):
        with patch(
            "stat_agent.engine.assembler.read_vnstat_traffic",
            side_effect=TrafficAccountingError("failed to execute /usr/bin/vnstat"),
        ):
            with pytest.raises(TrafficAccountingError):
                sample(_settings(proc, vnstat=True), *states)

    def test_vnstat_failure_degrades_when_configured(self, proc, states):
        with patch(
            "stat_agent.engine.assembler.read_vnstat_traffic",
            autospec=True,
            side_effect=TrafficAccountingError("failed to execute /usr/bin/vnstat"),
        ):
            stat = sample(_settings(proc, vnstat=True, fatal_policy="degrade"), *states)
        assert (stat.network_in, stat.last_network_in) == (0, 0)
