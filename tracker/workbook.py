"""
The spreadsheet as seen by the record services.

A ``Workbook`` bundles the row store, the names of the ranges records live
in, and the process-local row index for holdings. One workbook is created
per application and handed to services through ``get_workbook``.
"""

from dataclasses import dataclass, field

from fastapi import Request

from tracker.config import Settings
from tracker.sheets import RowStore


class RowIndex:
    """Best-effort map of holding id -> 1-indexed row position.

    Not a source of truth: entries may go stale when the sheet is edited by
    hand or by a concurrent request. Callers verify a hit and rebuild the
    index on any miss.
    """

    def __init__(self):
        self._rows: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, holding_id: str) -> bool:
        return holding_id in self._rows

    def get(self, holding_id: str) -> int | None:
        return self._rows.get(holding_id)

    def replace(self, rows: dict[str, int]) -> None:
        """Swap in a freshly read set of positions."""
        self._rows = dict(rows)

    def remove_row(self, row: int) -> None:
        """Forget the record at ``row`` and shift the rows below it up."""
        self._rows = {
            holding_id: position - 1 if position > row else position
            for holding_id, position in self._rows.items()
            if position != row
        }


@dataclass
class Workbook:
    """Row store plus the layout of the portfolio spreadsheet."""

    store: RowStore
    holdings_range: str = "MF_STOCKS"
    holdings_sheet: str = "MF & Stocks"
    ideal_allocation_range: str = "IDEAL_ALLOCATION"
    monthly_growth_range: str = "MONTHLY_GROWTH"
    snapshot_range: str = "SNAPSHOT"
    row_index: RowIndex = field(default_factory=RowIndex)

    @classmethod
    def from_settings(cls, settings: Settings, store: RowStore) -> "Workbook":
        return cls(
            store=store,
            holdings_range=settings.holdings_range,
            holdings_sheet=settings.holdings_sheet,
            ideal_allocation_range=settings.ideal_allocation_range,
            monthly_growth_range=settings.monthly_growth_range,
            snapshot_range=settings.snapshot_range,
        )


def get_workbook(request: Request) -> Workbook:
    """Dependency that provides the application's workbook.

    Usage in FastAPI:
        @router.get("/example")
        async def example(book: Workbook = Depends(get_workbook)):
            ...
    """
    return request.app.state.workbook
