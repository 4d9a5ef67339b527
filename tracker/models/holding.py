"""
Holding record - one position in the portfolio.

Stored as a row of the holdings named range, columns A-L:
id, symbol, name, sector, qty, avg_price, current_price, value, rsi,
allocation_pct, notes, updated_at.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from tracker.models.cells import (
    cell_at,
    parse_decimal,
    parse_optional_decimal,
    parse_str,
    parse_timestamp,
    to_cell,
)

# Spreadsheet column letters spanned by a holding row
FIRST_COLUMN = "A"
LAST_COLUMN = "L"


@dataclass
class Holding:
    """A position: what is held, how much, and at what prices."""

    id: str
    symbol: str
    name: str
    sector: str
    qty: Decimal
    avg_price: Decimal
    current_price: Decimal
    allocation_pct: Decimal
    updated_at: datetime
    rsi: Decimal | None = None
    notes: str = ""

    @property
    def value(self) -> Decimal:
        """Current market value; always derived from qty and current_price."""
        return self.qty * self.current_price

    @property
    def invested(self) -> Decimal:
        """Amount paid for the position."""
        return self.qty * self.avg_price

    @classmethod
    def from_row(cls, row: list[Any]) -> "Holding":
        return cls(
            id=parse_str(cell_at(row, 0)),
            symbol=parse_str(cell_at(row, 1)),
            name=parse_str(cell_at(row, 2)),
            sector=parse_str(cell_at(row, 3)),
            qty=parse_decimal(cell_at(row, 4)),
            avg_price=parse_decimal(cell_at(row, 5)),
            current_price=parse_decimal(cell_at(row, 6)),
            # Column 7 holds the stored value; it is recomputed, not read
            rsi=parse_optional_decimal(cell_at(row, 8)),
            allocation_pct=parse_decimal(cell_at(row, 9)),
            notes=parse_str(cell_at(row, 10)),
            updated_at=parse_timestamp(cell_at(row, 11), default=datetime.now(UTC)),
        )

    def to_row(self) -> list[Any]:
        return [
            self.id,
            self.symbol,
            self.name,
            self.sector,
            to_cell(self.qty),
            to_cell(self.avg_price),
            to_cell(self.current_price),
            to_cell(self.value),
            to_cell(self.rsi),
            to_cell(self.allocation_pct),
            self.notes or "",
            to_cell(self.updated_at),
        ]
