from .snapshot import Snapshot, TrafficSource

__all__ = [
    "Snapshot",
    "TrafficSource",
]
