"""
Application layer: commands, the cycle runner and the refresh timer.
"""

from .commands import AddTransaction, Command, SellAll, SnapshotNow, Tick
from .cycle import CycleResult, PortfolioCycle
from .scheduler import RefreshScheduler
from .snapshots import SnapshotRecorder

__all__ = [
    "AddTransaction",
    "Command",
    "CycleResult",
    "PortfolioCycle",
    "RefreshScheduler",
    "SellAll",
    "SnapshotNow",
    "SnapshotRecorder",
    "Tick",
]
