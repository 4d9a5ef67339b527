"""Snapshot endpoints - requires authentication."""

from fastapi import APIRouter, Depends, status

from tracker.schemas.snapshot import SnapshotResponse
from tracker.services import snapshots as snapshot_service
from tracker.workbook import Workbook, get_workbook

router = APIRouter()


@router.post(
    "/snapshot",
    response_model=list[SnapshotResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Take a snapshot",
)
async def create_snapshot(
    book: Workbook = Depends(get_workbook),
) -> list[SnapshotResponse]:
    """Record today's actual vs. target allocation for every target sector.

    Returns the batch that was written.
    """
    snapshots = await snapshot_service.create_snapshot(book)
    return [SnapshotResponse.model_validate(s) for s in snapshots]


@router.get(
    "/snapshots",
    response_model=list[SnapshotResponse],
    summary="List snapshots",
)
async def list_snapshots(
    book: Workbook = Depends(get_workbook),
) -> list[SnapshotResponse]:
    """Get every stored snapshot line, newest date first."""
    snapshots = await snapshot_service.list_snapshots(book)
    return [SnapshotResponse.model_validate(s) for s in snapshots]
