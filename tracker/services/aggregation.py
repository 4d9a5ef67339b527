"""Aggregation engine - portfolio KPIs and allocation snapshots.

Everything here is a pure function of its inputs. Callers fetch the records
and, for snapshots, persist the result.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal

from tracker.models import Holding, IdealAllocation, MonthlyGrowthEntry, Snapshot

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Number of most recent growth entries returned as the monthly trend
TREND_LENGTH = 12


@dataclass
class Summary:
    """Headline figures for the whole portfolio."""

    total_invested: Decimal
    current_net_worth: Decimal
    unrealized_gain_loss: Decimal
    unrealized_pct: Decimal
    allocation_variance: dict[str, Decimal]
    monthly_trend: list[MonthlyGrowthEntry]
    ytd_growth: Decimal


def sector_totals(holdings: list[Holding]) -> dict[str, Decimal]:
    """Market value held in each sector."""
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for holding in holdings:
        totals[holding.sector] += holding.value
    return dict(totals)


def actual_pct(sector_value: Decimal, total_value: Decimal) -> Decimal:
    """Share of the portfolio, in percent. Zero for an empty portfolio."""
    if total_value == 0:
        return ZERO
    return sector_value / total_value * HUNDRED


def allocation_variance(
    holdings: list[Holding], ideals: list[IdealAllocation]
) -> dict[str, Decimal]:
    """Actual minus target percentage for every sector that has a target.

    Sectors that are held but have no target are left out.
    """
    net_worth = sum((h.value for h in holdings), ZERO)
    totals = sector_totals(holdings)
    return {
        ideal.sector: actual_pct(totals.get(ideal.sector, ZERO), net_worth) - ideal.target_pct
        for ideal in ideals
    }


def ytd_growth(growth: list[MonthlyGrowthEntry], year: int) -> Decimal:
    """Total P&L booked in months of ``year``.

    Matches on the ``YYYY`` prefix of the month string, so only calendar-year
    entries count.
    """
    prefix = str(year)
    return sum((entry.pnl for entry in growth if entry.month.startswith(prefix)), ZERO)


def monthly_trend(
    growth: list[MonthlyGrowthEntry], limit: int = TREND_LENGTH
) -> list[MonthlyGrowthEntry]:
    """The ``limit`` latest entries in chronological order.

    Works on a sorted copy; the caller's list keeps its order.
    """
    latest = sorted(growth, key=lambda entry: entry.month, reverse=True)[:limit]
    latest.reverse()
    return latest


def compute_summary(
    holdings: list[Holding],
    ideals: list[IdealAllocation],
    growth: list[MonthlyGrowthEntry],
    now: datetime | None = None,
) -> Summary:
    """Compute portfolio KPIs.

    Args:
        holdings: Current holdings
        ideals: Target allocation per sector
        growth: Monthly P&L entries, in any order
        now: Reference time for the current year (defaults to now, UTC)

    Returns:
        Summary of the portfolio
    """
    now = now or datetime.now(UTC)

    total_invested = sum((h.invested for h in holdings), ZERO)
    net_worth = sum((h.value for h in holdings), ZERO)
    gain_loss = net_worth - total_invested
    if total_invested > 0:
        unrealized_pct = gain_loss / total_invested * HUNDRED
    else:
        unrealized_pct = ZERO

    return Summary(
        total_invested=total_invested,
        current_net_worth=net_worth,
        unrealized_gain_loss=gain_loss,
        unrealized_pct=unrealized_pct,
        allocation_variance=allocation_variance(holdings, ideals),
        monthly_trend=monthly_trend(growth),
        ytd_growth=ytd_growth(growth, now.year),
    )


def compute_snapshots(
    holdings: list[Holding],
    ideals: list[IdealAllocation],
    today: date | None = None,
) -> list[Snapshot]:
    """Build one snapshot per target sector, in the order targets are given.

    All snapshots share the date and the portfolio's total value.
    """
    today = today or datetime.now(UTC).date()
    stamp = today.isoformat()

    total_value = sum((h.value for h in holdings), ZERO)
    totals = sector_totals(holdings)

    snapshots = []
    for ideal in ideals:
        pct = actual_pct(totals.get(ideal.sector, ZERO), total_value)
        snapshots.append(
            Snapshot(
                date=stamp,
                sector=ideal.sector,
                actual_pct=pct,
                target_pct=ideal.target_pct,
                variance=pct - ideal.target_pct,
                total_value=total_value,
            )
        )
    return snapshots
