"""
Persistence for transactions, snapshots and settings.
"""

from .database import PortfolioDatabase
from .settings_store import SettingsStore

__all__ = ["PortfolioDatabase", "SettingsStore"]
