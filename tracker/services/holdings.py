"""Holdings service - create, read, update and delete holding rows.

Rows are located through the workbook's row index. The index is only a
hint: a position is trusted once the row found there carries the expected
id, and any miss rebuilds the whole index exactly once before giving up.
"""

import dataclasses
import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from tracker import telemetry
from tracker.errors import NotFoundError
from tracker.models import Holding
from tracker.models.cells import cell_at, is_blank, parse_str
from tracker.models.holding import FIRST_COLUMN, LAST_COLUMN
from tracker.schemas.holding import HoldingCreate, HoldingUpdate
from tracker.sheets import a1_row_range
from tracker.workbook import Workbook

logger = logging.getLogger(__name__)


async def _read_rows(book: Workbook) -> dict[str, tuple[int, list[Any]]]:
    """Read the holdings range and rebuild the row index from it.

    Returns:
        Mapping of holding id -> (1-indexed row position, raw row)
    """
    rows = await book.store.get(book.holdings_range)

    found: dict[str, tuple[int, list[Any]]] = {}
    # Row 1 is the header; positions follow the sheet's 1-indexed rows
    for position, row in enumerate(rows[1:], start=2):
        if is_blank(cell_at(row, 0)):
            continue
        found[parse_str(cell_at(row, 0))] = (position, row)

    book.row_index.replace({holding_id: position for holding_id, (position, _) in found.items()})
    return found


async def _fetch_row(book: Workbook, position: int) -> list[Any]:
    rows = await book.store.get(
        a1_row_range(book.holdings_sheet, position, FIRST_COLUMN, LAST_COLUMN)
    )
    return rows[0] if rows else []


async def _locate(book: Workbook, holding_id: str) -> tuple[int, list[Any]]:
    """Find the row holding ``holding_id``.

    Raises:
        NotFoundError: If the id is not in the sheet after one rebuild
    """
    position = book.row_index.get(holding_id)
    if position is not None:
        row = await _fetch_row(book, position)
        if parse_str(cell_at(row, 0)) == holding_id:
            return position, row
        logger.info(f"Row index stale for holding {holding_id} (row {position}), rebuilding")

    found = await _read_rows(book)
    if holding_id not in found:
        raise NotFoundError(f"Holding with ID {holding_id} not found")
    return found[holding_id]


async def list_holdings(book: Workbook) -> list[Holding]:
    """Get all holdings, in sheet order.

    Args:
        book: Workbook to read from

    Returns:
        List of holdings
    """
    found = await _read_rows(book)
    return [Holding.from_row(row) for _, row in found.values()]


async def create_holding(book: Workbook, data: HoldingCreate) -> Holding:
    """Add a holding as a new row.

    The id is a random UUID4 and is not checked against existing rows.

    Args:
        book: Workbook to write to
        data: Holding fields supplied by the client

    Returns:
        The created holding
    """
    holding = Holding(
        id=str(uuid.uuid4()),
        symbol=data.symbol,
        name=data.name,
        sector=data.sector,
        qty=data.qty,
        avg_price=data.avg_price,
        current_price=data.current_price,
        rsi=data.rsi,
        allocation_pct=data.allocation_pct,
        notes=data.notes or "",
        updated_at=datetime.now(UTC),
    )

    await book.store.append(book.holdings_range, [holding.to_row()])

    logger.info(f"Created holding {holding.id} ({holding.symbol})")
    telemetry.record_holding_change("create")
    return holding


async def update_holding(book: Workbook, holding_id: str, data: HoldingUpdate) -> Holding:
    """Apply a partial update to a holding.

    Only supplied fields change; ``updated_at`` is always refreshed, so an
    empty update just touches the row.

    Args:
        book: Workbook to write to
        holding_id: ID of the holding to update
        data: Fields to change

    Returns:
        The updated holding

    Raises:
        NotFoundError: If no holding has this id
    """
    position, row = await _locate(book, holding_id)
    current = Holding.from_row(row)

    updated = dataclasses.replace(
        current,
        **data.changes(),
        id=holding_id,
        updated_at=datetime.now(UTC),
    )

    await book.store.update(
        a1_row_range(book.holdings_sheet, position, FIRST_COLUMN, LAST_COLUMN),
        [updated.to_row()],
    )

    logger.info(f"Updated holding {holding_id} at row {position}")
    telemetry.record_holding_change("update")
    return updated


async def delete_holding(book: Workbook, holding_id: str) -> None:
    """Delete a holding's row from the sheet.

    Args:
        book: Workbook to write to
        holding_id: ID of the holding to delete

    Raises:
        NotFoundError: If no holding has this id
    """
    position, _ = await _locate(book, holding_id)
    sheet_id = await book.store.resolve_table_id(book.holdings_sheet)

    # Dimension ranges are 0-indexed and end-exclusive
    await book.store.batch_delete(sheet_id, position - 1, position)
    book.row_index.remove_row(position)

    logger.info(f"Deleted holding {holding_id} from row {position}")
    telemetry.record_holding_change("delete")
