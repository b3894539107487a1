"""
Snapshot recorder.
"""

from collections.abc import Callable
from datetime import UTC, datetime

from loguru import logger

from portfolio_engine.core.interfaces.storage import ISnapshotStore
from portfolio_engine.core.models.snapshot import Snapshot


def utc_now() -> datetime:
    return datetime.now(UTC)


class SnapshotRecorder:
    """Append portfolio values to the snapshot series.

    Recording is an upsert keyed by timestamp: a second sample in the
    same millisecond replaces the first.
    """

    def __init__(self, store: ISnapshotStore, clock: Callable[[], datetime] = utc_now) -> None:
        self.store = store
        self.clock = clock

    def record(self, value: float, ts: datetime | None = None) -> Snapshot:
        """Persist ``value`` at ``ts`` (default: now) and return the snapshot."""
        snapshot = Snapshot(ts=ts if ts is not None else self.clock(), value=value)
        self.store.put_snapshot(snapshot)
        logger.debug(f"Recorded snapshot {snapshot.key} = {snapshot.value:.2f}")
        return snapshot

    def history(self) -> list[Snapshot]:
        """All recorded snapshots in time order."""
        return self.store.list_snapshots()
