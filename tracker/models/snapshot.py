"""Snapshot record - actual vs. target allocation for a sector on a given day."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from tracker.models.cells import cell_at, is_blank, parse_decimal, parse_str, to_cell


@dataclass(frozen=True)
class Snapshot:
    """One sector's line in a snapshot run.

    All snapshots written by the same run share ``date`` and ``total_value``.
    """

    date: str
    sector: str
    actual_pct: Decimal
    target_pct: Decimal
    variance: Decimal
    total_value: Decimal

    @staticmethod
    def is_complete_row(row: list[Any]) -> bool:
        return not is_blank(cell_at(row, 0)) and not is_blank(cell_at(row, 1))

    @classmethod
    def from_row(cls, row: list[Any]) -> "Snapshot":
        return cls(
            date=parse_str(cell_at(row, 0)),
            sector=parse_str(cell_at(row, 1)),
            actual_pct=parse_decimal(cell_at(row, 2)),
            target_pct=parse_decimal(cell_at(row, 3)),
            variance=parse_decimal(cell_at(row, 4)),
            total_value=parse_decimal(cell_at(row, 5)),
        )

    def to_row(self) -> list[Any]:
        return [
            self.date,
            self.sector,
            to_cell(self.actual_pct),
            to_cell(self.target_pct),
            to_cell(self.variance),
            to_cell(self.total_value),
        ]
