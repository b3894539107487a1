"""
Core enumerations for the portfolio engine.

This module provides centralized enumerations for domain concepts
like trade sides and lifecycle states.
"""

from .lifecycle import CycleState, StoreState
from .sides import Side

__all__ = ["Side", "CycleState", "StoreState"]
