from .errors import FatalCollectorError, RequiredFieldAbsent, TrafficAccountingError
from .probe import probe_connectivity
from .procfs import (
    InterfaceFilter,
    read_cpu_counters,
    read_interface_counters,
    read_load_averages,
    read_memory_info,
    read_uptime_seconds,
)
from .tools import read_disk_usage, read_vnstat_traffic

__all__ = [
    "FatalCollectorError",
    "InterfaceFilter",
    "RequiredFieldAbsent",
    "TrafficAccountingError",
    "probe_connectivity",
    "read_cpu_counters",
    "read_disk_usage",
    "read_interface_counters",
    "read_load_averages",
    "read_memory_info",
    "read_uptime_seconds",
    "read_vnstat_traffic",
]
