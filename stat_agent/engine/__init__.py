from .assembler import sample, traffic_source
from .rates import compute_cpu_percent, compute_rate
from .sampler import BaseSampler, CpuSampler, NetSpeedSampler
from .state import CpuPercentState, NetSpeed, NetSpeedState

__all__ = [
    "BaseSampler",
    "CpuPercentState",
    "CpuSampler",
    "NetSpeed",
    "NetSpeedSampler",
    "NetSpeedState",
    "compute_cpu_percent",
    "compute_rate",
    "sample",
    "traffic_source",
]
