"""Monthly growth service - append-only P&L log."""

import logging

from tracker import telemetry
from tracker.models import MonthlyGrowthEntry
from tracker.schemas.growth import MonthlyGrowthCreate
from tracker.workbook import Workbook

logger = logging.getLogger(__name__)


async def list_monthly_growth(book: Workbook) -> list[MonthlyGrowthEntry]:
    """Get all growth entries, oldest month first.

    Rows missing a month, account or P&L are skipped.
    """
    rows = await book.store.get(book.monthly_growth_range)
    entries = [
        MonthlyGrowthEntry.from_row(row)
        for row in rows[1:]
        if MonthlyGrowthEntry.is_complete_row(row)
    ]
    return sorted(entries, key=lambda entry: entry.month)


async def add_monthly_growth(book: Workbook, data: MonthlyGrowthCreate) -> MonthlyGrowthEntry:
    """Append one growth entry.

    Args:
        book: Workbook to write to
        data: Validated entry

    Returns:
        The stored entry
    """
    entry = MonthlyGrowthEntry(month=data.month, account=data.account, pnl=data.pnl)
    await book.store.append(book.monthly_growth_range, [entry.to_row()])

    logger.info(f"Recorded {entry.month} growth for {entry.account}: {entry.pnl}")
    telemetry.record_growth_entry(entry.account)
    return entry
