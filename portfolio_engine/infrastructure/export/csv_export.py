"""
Flat-file export of the transaction log and the snapshot series.

The export is one text file with two CSV sections separated by a blank
line. Fields containing the delimiter, quotes or newlines are quoted,
with embedded quotes doubled, so free-text notes survive a round trip.
"""

import csv
from collections.abc import Iterable
from pathlib import Path

import pandas as pd
from loguru import logger

from portfolio_engine.core.models.snapshot import Snapshot
from portfolio_engine.core.models.transaction import Transaction

TRANSACTION_COLUMNS = ["id", "date", "side", "symbol", "qty", "price", "notes"]
SNAPSHOT_COLUMNS = ["ts", "value"]

TRANSACTIONS_HEADING = "Transactions"
SNAPSHOTS_HEADING = "Snapshots"


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Tabulate transactions with the export column layout."""
    records = [
        {
            "id": t.id,
            "date": t.date.isoformat(),
            "side": t.side.value,
            "symbol": t.symbol,
            "qty": t.qty,
            "price": t.price,
            "notes": t.notes or "",
        }
        for t in transactions
    ]
    frame = pd.DataFrame.from_records(records, columns=TRANSACTION_COLUMNS)
    return frame.astype({"id": "Int64"})


def snapshots_frame(snapshots: Iterable[Snapshot]) -> pd.DataFrame:
    """Tabulate snapshots with the export column layout."""
    records = [{"ts": s.key, "value": s.value} for s in snapshots]
    return pd.DataFrame.from_records(records, columns=SNAPSHOT_COLUMNS)


def _to_csv(frame: pd.DataFrame) -> str:
    return frame.to_csv(index=False, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")


def export_csv(transactions: Iterable[Transaction], snapshots: Iterable[Snapshot]) -> str:
    """Render transactions and snapshots as the two-section export text."""
    return (
        f"{TRANSACTIONS_HEADING}\n"
        f"{_to_csv(transactions_frame(transactions))}"
        "\n"
        f"{SNAPSHOTS_HEADING}\n"
        f"{_to_csv(snapshots_frame(snapshots))}"
    )


def write_export(
    path: Path | str,
    transactions: Iterable[Transaction],
    snapshots: Iterable[Snapshot],
) -> Path:
    """Write the export text to ``path`` and return the path."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(export_csv(transactions, snapshots), encoding="utf-8")
    logger.info(f"Exported portfolio to {target}")
    return target
