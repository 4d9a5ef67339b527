"""API routers."""

from tracker.routers.allocation import router as allocation_router
from tracker.routers.growth import router as growth_router
from tracker.routers.holdings import router as holdings_router
from tracker.routers.snapshots import router as snapshots_router
from tracker.routers.summary import router as summary_router

__all__ = [
    "allocation_router",
    "growth_router",
    "holdings_router",
    "snapshots_router",
    "summary_router",
]
