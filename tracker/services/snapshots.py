"""Snapshot service - persist and read allocation snapshots."""

import asyncio
import logging
from datetime import date

from tracker import telemetry
from tracker.models import Snapshot
from tracker.services.aggregation import compute_snapshots
from tracker.services.allocation import list_ideal_allocation
from tracker.services.holdings import list_holdings
from tracker.workbook import Workbook

logger = logging.getLogger(__name__)


async def create_snapshot(book: Workbook, today: date | None = None) -> list[Snapshot]:
    """Compute today's snapshot for every target sector and store it.

    All rows go out in one append: either the whole batch is written or the
    append error propagates.

    Args:
        book: Workbook to read from and write to
        today: Snapshot date (defaults to the current UTC date)

    Returns:
        The snapshots written, in target-allocation order
    """
    holdings, ideals = await asyncio.gather(
        list_holdings(book),
        list_ideal_allocation(book),
    )

    snapshots = compute_snapshots(holdings, ideals, today)
    if not snapshots:
        logger.info("No target allocation defined, snapshot skipped")
        return []

    await book.store.append(book.snapshot_range, [s.to_row() for s in snapshots])

    logger.info(
        f"Wrote snapshot for {snapshots[0].date}: {len(snapshots)} sectors, "
        f"total value {snapshots[0].total_value}"
    )
    telemetry.record_snapshot(len(snapshots))
    return snapshots


async def list_snapshots(book: Workbook) -> list[Snapshot]:
    """Get all snapshots, newest date first."""
    rows = await book.store.get(book.snapshot_range)
    snapshots = [Snapshot.from_row(row) for row in rows[1:] if Snapshot.is_complete_row(row)]
    return sorted(snapshots, key=lambda snapshot: snapshot.date, reverse=True)
