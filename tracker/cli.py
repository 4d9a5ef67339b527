#!/usr/bin/env python3
"""
Command-line client for the portfolio tracker API.

Usage:
    python -m tracker.cli <resource> <verb> [args] [options]

Examples:
    python -m tracker.cli holdings list
    python -m tracker.cli holdings add VTI "Vanguard Total Market" equity --qty 10 --avg-price 200 --current-price 250 --allocation 40
    python -m tracker.cli growth add 2024-05 brokerage 312.50
    python -m tracker.cli snapshot create
    python -m tracker.cli summary -o json
"""

from contextlib import contextmanager

import click
import httpx

from tracker import output as out
from tracker.client import APIError, TrackerClient


# =============================================================================
# CLI Context
# =============================================================================


class Context:
    """CLI context holding configuration and the API client."""

    def __init__(self):
        self.url: str = "http://localhost:3000"
        self.api_key: str | None = None
        self.output_format: str = "table"
        self._client: TrackerClient | None = None

    @property
    def client(self) -> TrackerClient:
        if self._client is None:
            self._client = TrackerClient(self.url, api_key=self.api_key)
        return self._client


pass_context = click.make_pass_decorator(Context, ensure=True)


@contextmanager
def api_errors(ctx: Context):
    """Turn API and connection failures into an error message and exit 1."""
    try:
        yield
    except APIError as e:
        out.error(e.detail)
        raise SystemExit(1)
    except httpx.ConnectError:
        out.error(f"Cannot connect to tracker at {ctx.url}")
        raise SystemExit(1)


HOLDING_COLUMNS = [
    out.Column("id", "ID", 36),
    out.Column("symbol", "Symbol", 10),
    out.Column("sector", "Sector", 14),
    out.Column("qty", "Qty", 14, "quantity"),
    out.Column("current_price", "Price", 12, "money"),
    out.Column("value", "Value", 14, "money"),
    out.Column("allocation_pct", "Alloc %", 8, "percent"),
]
GROWTH_COLUMNS = [
    out.Column("month", "Month", 8),
    out.Column("account", "Account", 20),
    out.Column("pnl", "P&L", 14, "money"),
]
SNAPSHOT_COLUMNS = [
    out.Column("date", "Date", 10),
    out.Column("sector", "Sector", 14),
    out.Column("actual_pct", "Actual %", 10, "percent"),
    out.Column("target_pct", "Target %", 10, "percent"),
    out.Column("variance", "Variance", 10, "percent"),
    out.Column("total_value", "Total Value", 14, "money"),
]
ALLOCATION_COLUMNS = [
    out.Column("sector", "Sector", 20),
    out.Column("target_pct", "Target %", 10, "percent"),
]

# Formatters for single-record (key: value) output
HOLDING_KINDS = {
    "qty": "quantity",
    "avg_price": "money",
    "current_price": "money",
    "value": "money",
    "rsi": "percent",
    "allocation_pct": "percent",
}
SUMMARY_KINDS = {
    "total_invested": "money",
    "current_net_worth": "money",
    "unrealized_gain_loss": "money",
    "unrealized_pct": "percent",
    "allocation_variance": "percent",
    "ytd_growth": "money",
}


# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.option(
    "--url", "-u",
    envvar="TRACKER_URL",
    default="http://localhost:3000",
    help="Tracker API URL",
)
@click.option(
    "--api-key", "-k",
    envvar="TRACKER_API_KEY",
    default=None,
    help="API key sent as x-api-key",
)
@click.option(
    "--output", "-o",
    type=click.Choice(["table", "json", "yaml"]),
    default="table",
    help="Output format",
)
@pass_context
def cli(ctx: Context, url: str, api_key: str | None, output: str):
    """Manage a portfolio kept in a Google Sheets workbook."""
    ctx.url = url
    ctx.api_key = api_key
    ctx.output_format = output


@cli.command("health")
@pass_context
def health(ctx: Context):
    """Check that the API is up."""
    with api_errors(ctx):
        out.output(ctx.client.health(), ctx.output_format)


@cli.command("summary")
@pass_context
def summary(ctx: Context):
    """Show portfolio KPIs."""
    with api_errors(ctx):
        data = ctx.client.get_summary()
        out.output(data, ctx.output_format, kinds=SUMMARY_KINDS)
        if ctx.output_format == "table" and data.get("monthly_trend"):
            out.info("")
            out.output(data["monthly_trend"], "table", GROWTH_COLUMNS)


# =============================================================================
# Holding Commands
# =============================================================================


@cli.group()
def holdings():
    """Manage holdings."""
    pass


@holdings.command("list")
@pass_context
def holdings_list(ctx: Context):
    """List all holdings."""
    with api_errors(ctx):
        out.output(ctx.client.list_holdings(), ctx.output_format, HOLDING_COLUMNS)


@holdings.command("add")
@click.argument("symbol")
@click.argument("name")
@click.argument("sector")
@click.option("--qty", type=float, required=True, help="Units held")
@click.option("--avg-price", type=float, required=True, help="Average purchase price")
@click.option("--current-price", type=float, required=True, help="Latest price")
@click.option("--allocation", type=float, required=True, help="Declared allocation percent")
@click.option("--rsi", type=float, default=None, help="Relative strength index")
@click.option("--notes", default=None, help="Free-form notes")
@pass_context
def holdings_add(
    ctx: Context,
    symbol: str,
    name: str,
    sector: str,
    qty: float,
    avg_price: float,
    current_price: float,
    allocation: float,
    rsi: float | None,
    notes: str | None,
):
    """Add a holding."""
    fields = {
        "symbol": symbol,
        "name": name,
        "sector": sector,
        "qty": qty,
        "avg_price": avg_price,
        "current_price": current_price,
        "allocation_pct": allocation,
    }
    if rsi is not None:
        fields["rsi"] = rsi
    if notes is not None:
        fields["notes"] = notes

    with api_errors(ctx):
        result = ctx.client.create_holding(**fields)
        out.success(f"Created holding {result['id']}")
        out.output(result, ctx.output_format, kinds=HOLDING_KINDS)


@holdings.command("update")
@click.argument("holding_id")
@click.option("--symbol", default=None)
@click.option("--name", default=None)
@click.option("--sector", default=None)
@click.option("--qty", type=float, default=None)
@click.option("--avg-price", type=float, default=None)
@click.option("--current-price", type=float, default=None)
@click.option("--allocation", type=float, default=None)
@click.option("--rsi", type=float, default=None)
@click.option("--notes", default=None)
@pass_context
def holdings_update(ctx: Context, holding_id: str, allocation: float | None, **options):
    """Change some fields of a holding."""
    changes = {key: value for key, value in options.items() if value is not None}
    if allocation is not None:
        changes["allocation_pct"] = allocation

    with api_errors(ctx):
        result = ctx.client.update_holding(holding_id, **changes)
        out.success(f"Updated holding {holding_id}")
        out.output(result, ctx.output_format, kinds=HOLDING_KINDS)


@holdings.command("delete")
@click.argument("holding_id")
@pass_context
def holdings_delete(ctx: Context, holding_id: str):
    """Delete a holding."""
    with api_errors(ctx):
        ctx.client.delete_holding(holding_id)
        out.success(f"Deleted holding {holding_id}")


# =============================================================================
# Allocation and Growth Commands
# =============================================================================


@cli.group()
def allocation():
    """Inspect the target allocation."""
    pass


@allocation.command("list")
@pass_context
def allocation_list(ctx: Context):
    """List target percentages per sector."""
    with api_errors(ctx):
        out.output(ctx.client.get_ideal_allocation(), ctx.output_format, ALLOCATION_COLUMNS)


@cli.group()
def growth():
    """Manage monthly P&L entries."""
    pass


@growth.command("list")
@pass_context
def growth_list(ctx: Context):
    """List monthly P&L entries, oldest first."""
    with api_errors(ctx):
        out.output(ctx.client.list_monthly_growth(), ctx.output_format, GROWTH_COLUMNS)


@growth.command("add")
@click.argument("month")
@click.argument("account")
@click.argument("pnl", type=float)
@pass_context
def growth_add(ctx: Context, month: str, account: str, pnl: float):
    """Record P&L for MONTH (YYYY-MM) in ACCOUNT."""
    with api_errors(ctx):
        result = ctx.client.add_monthly_growth(month, account, pnl)
        out.success(f"Recorded {month} for {account}")
        out.output(result, ctx.output_format, kinds={"pnl": "money"})


# =============================================================================
# Snapshot Commands
# =============================================================================


@cli.group()
def snapshot():
    """Take and list allocation snapshots."""
    pass


@snapshot.command("create")
@pass_context
def snapshot_create(ctx: Context):
    """Snapshot today's allocation."""
    with api_errors(ctx):
        result = ctx.client.create_snapshot()
        out.success(f"Snapshot written for {len(result)} sectors")
        out.output(result, ctx.output_format, SNAPSHOT_COLUMNS)


@snapshot.command("list")
@pass_context
def snapshot_list(ctx: Context):
    """List stored snapshots, newest first."""
    with api_errors(ctx):
        out.output(ctx.client.list_snapshots(), ctx.output_format, SNAPSHOT_COLUMNS)


if __name__ == "__main__":
    cli()
