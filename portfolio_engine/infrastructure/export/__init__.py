"""
Portfolio export.
"""

from .csv_export import export_csv, write_export

__all__ = ["export_csv", "write_export"]
