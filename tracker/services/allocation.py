"""Ideal allocation service - target percentages per sector."""

from tracker.models import IdealAllocation
from tracker.workbook import Workbook


async def list_ideal_allocation(book: Workbook) -> list[IdealAllocation]:
    """Get the target allocation, in sheet order.

    Rows missing a sector or a target are skipped.
    """
    rows = await book.store.get(book.ideal_allocation_range)
    return [
        IdealAllocation.from_row(row)
        for row in rows[1:]
        if IdealAllocation.is_complete_row(row)
    ]
