"""
Lifecycle state enumerations.

This module defines the states of the refresh cycle and of the storage handle.
"""

from enum import StrEnum


class CycleState(StrEnum):
    """
    States of one accounting cycle.

    A cycle always moves IDLE -> FETCHING -> VALUATING -> SNAPSHOTTING -> IDLE.
    """

    IDLE = "idle"
    FETCHING = "fetching"
    VALUATING = "valuating"
    SNAPSHOTTING = "snapshotting"


class StoreState(StrEnum):
    """States of a storage handle."""

    CLOSED = "closed"
    READY = "ready"
