"""MonthlyGrowthEntry record - realized P&L for one account in one month.

Entries are append-only and have no identity of their own; several accounts
can report against the same month.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from tracker.models.cells import cell_at, is_blank, parse_decimal, parse_str, to_cell


@dataclass
class MonthlyGrowthEntry:
    """P&L booked by an account during a ``YYYY-MM`` month."""

    month: str
    account: str
    pnl: Decimal

    @staticmethod
    def is_complete_row(row: list[Any]) -> bool:
        return all(not is_blank(cell_at(row, i)) for i in range(3))

    @classmethod
    def from_row(cls, row: list[Any]) -> "MonthlyGrowthEntry":
        return cls(
            month=parse_str(cell_at(row, 0)),
            account=parse_str(cell_at(row, 1)),
            pnl=parse_decimal(cell_at(row, 2)),
        )

    def to_row(self) -> list[Any]:
        return [self.month, self.account, to_cell(self.pnl)]
