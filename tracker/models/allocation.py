"""IdealAllocation record - the target share of the portfolio for a sector."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from tracker.models.cells import cell_at, is_blank, parse_decimal, parse_str


@dataclass
class IdealAllocation:
    """Target percentage for one sector. Read-only for this service."""

    sector: str
    target_pct: Decimal

    @staticmethod
    def is_complete_row(row: list[Any]) -> bool:
        return not is_blank(cell_at(row, 0)) and not is_blank(cell_at(row, 1))

    @classmethod
    def from_row(cls, row: list[Any]) -> "IdealAllocation":
        return cls(
            sector=parse_str(cell_at(row, 0)),
            target_pct=parse_decimal(cell_at(row, 1)),
        )
