from __future__ import annotations


class FatalCollectorError(RuntimeError):
    """A load-bearing collector could not produce a value.

    Unlike the soft-fail collectors, which fall back to zeros, these errors
    abort the sampling pass.
    """


class RequiredFieldAbsent(FatalCollectorError):
    def __init__(self, field: str, source: str = "") -> None:
        self.field = field
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"required field {field!r} absent{where}")


class TrafficAccountingError(FatalCollectorError):
    """vnstat is missing, timed out, or produced unusable output."""
