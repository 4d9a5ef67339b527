"""Summary service - gathers the records the KPIs are computed from."""

import asyncio
from datetime import datetime

from tracker import telemetry
from tracker.services.aggregation import Summary, compute_summary
from tracker.services.allocation import list_ideal_allocation
from tracker.services.growth import list_monthly_growth
from tracker.services.holdings import list_holdings
from tracker.workbook import Workbook


async def get_summary(book: Workbook, now: datetime | None = None) -> Summary:
    """Read holdings, targets and growth, then compute the portfolio summary."""
    holdings, ideals, growth = await asyncio.gather(
        list_holdings(book),
        list_ideal_allocation(book),
        list_monthly_growth(book),
    )

    summary = compute_summary(holdings, ideals, growth, now)

    telemetry.record_summary(
        float(summary.current_net_worth),
        float(summary.unrealized_gain_loss),
        {sector: float(v) for sector, v in summary.allocation_variance.items()},
    )
    return summary
