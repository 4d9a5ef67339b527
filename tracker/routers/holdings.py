"""Holding endpoints - requires authentication."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from tracker.schemas.holding import HoldingCreate, HoldingResponse, HoldingUpdate
from tracker.services import holdings as holdings_service
from tracker.workbook import Workbook, get_workbook

router = APIRouter()


@router.get(
    "/holdings",
    response_model=list[HoldingResponse],
    summary="List holdings",
)
async def list_holdings(
    book: Workbook = Depends(get_workbook),
) -> list[HoldingResponse]:
    """Get every holding in the portfolio, in sheet order."""
    holdings = await holdings_service.list_holdings(book)
    return [HoldingResponse.model_validate(h) for h in holdings]


@router.post(
    "/holdings",
    response_model=HoldingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a holding",
)
async def create_holding(
    data: HoldingCreate,
    book: Workbook = Depends(get_workbook),
) -> HoldingResponse:
    """Add a new holding.

    The server assigns **id** and **updated_at** and computes
    **value** = qty * current_price.
    """
    holding = await holdings_service.create_holding(book, data)
    return HoldingResponse.model_validate(holding)


@router.put(
    "/holdings/{holding_id}",
    response_model=HoldingResponse,
    summary="Update a holding",
)
async def update_holding(
    holding_id: UUID,
    data: HoldingUpdate,
    book: Workbook = Depends(get_workbook),
) -> HoldingResponse:
    """Change any subset of a holding's fields.

    Fields left out are kept. **value** is recomputed and **updated_at**
    refreshed on every call, even an empty one.
    """
    holding = await holdings_service.update_holding(book, str(holding_id), data)
    return HoldingResponse.model_validate(holding)


@router.delete(
    "/holdings/{holding_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a holding",
)
async def delete_holding(
    holding_id: UUID,
    book: Workbook = Depends(get_workbook),
) -> Response:
    """Remove a holding's row from the sheet."""
    await holdings_service.delete_holding(book, str(holding_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
