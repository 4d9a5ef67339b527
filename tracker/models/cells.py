"""Parsing and formatting of individual spreadsheet cells.

The Sheets API hands back whatever a human typed: numbers, strings, blanks,
or nothing at all for trailing empty columns. Readers here are permissive:
a numeric cell that is missing or cannot be parsed reads as zero.
"""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def cell_at(row: list[Any], index: int) -> Any:
    """Return the cell at ``index`` or None when the row is shorter."""
    return row[index] if index < len(row) else None


def is_blank(cell: Any) -> bool:
    return cell is None or (isinstance(cell, str) and not cell.strip())


def parse_str(cell: Any) -> str:
    """Read a text cell; blanks become the empty string."""
    if is_blank(cell):
        return ""
    return str(cell)


def parse_decimal(cell: Any) -> Decimal:
    """Read a numeric cell; blank or unparseable cells become zero."""
    value = parse_optional_decimal(cell)
    return ZERO if value is None else value


def parse_optional_decimal(cell: Any) -> Decimal | None:
    """Read a numeric cell that may legitimately be empty.

    Returns None for blanks and zero for cells that hold something that is
    not a number.
    """
    if is_blank(cell):
        return None
    if isinstance(cell, bool):
        logger.warning(f"Non-numeric cell value {cell!r} read as 0")
        return ZERO

    try:
        value = Decimal(str(cell).strip())
    except InvalidOperation:
        logger.warning(f"Non-numeric cell value {cell!r} read as 0")
        return ZERO

    if not value.is_finite():
        logger.warning(f"Non-finite cell value {cell!r} read as 0")
        return ZERO
    return value


def parse_timestamp(cell: Any, default: datetime) -> datetime:
    """Read an ISO-8601 timestamp cell, falling back to ``default``."""
    if is_blank(cell):
        return default
    try:
        return datetime.fromisoformat(str(cell).strip())
    except ValueError:
        logger.warning(f"Unparseable timestamp {cell!r}, using {default.isoformat()}")
        return default


def to_cell(value: Any) -> Any:
    """Convert a Python value into something the Sheets API accepts as JSON."""
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value
