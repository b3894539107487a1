"""
Portfolio snapshot model.
"""

from dataclasses import dataclass
from datetime import datetime

from portfolio_engine.core.utils.validation import validate_finite, validate_timestamp


@dataclass(frozen=True)
class Snapshot:
    """Total portfolio value sampled at one instant.

    Snapshots are keyed by ``key``, the millisecond-resolution UTC ISO
    timestamp; two samples in the same millisecond share a key.
    """

    ts: datetime
    value: float

    def __post_init__(self) -> None:
        ts = validate_timestamp(self.ts, "ts")
        object.__setattr__(self, "ts", ts.replace(microsecond=ts.microsecond // 1000 * 1000))
        object.__setattr__(self, "value", validate_finite(self.value, "value"))

    @property
    def key(self) -> str:
        """Storage key for this snapshot."""
        return self.ts.isoformat(timespec="milliseconds")
