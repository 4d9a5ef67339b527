"""
Shared pytest fixtures for testing the portfolio tracker.

The Google Sheets API is replaced by ``FakeSheets``, an in-memory workbook
that understands the named ranges and single-row A1 references the
services use.
"""

import copy
import re
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tracker.config import Settings
from tracker.errors import UpstreamRangeError
from tracker.main import create_app
from tracker.workbook import Workbook

API_TOKEN = "test-token"

HOLDINGS_HEADER = [
    "id", "symbol", "name", "sector", "qty", "avg_price", "current_price",
    "value", "rsi", "allocation_pct", "notes", "updated_at",
]

ROW_REF = re.compile(r"^'(?P<title>(?:[^']|'')+)'!(?P<first>[A-Z]+)(?P<row>\d+):(?P<last>[A-Z]+)(?P=row)$")


class FakeSheets:
    """In-memory spreadsheet implementing the row store interface."""

    def __init__(self):
        self.tabs: dict[str, list[list[Any]]] = {}  # title -> rows, sheet row 1 first
        self.sheet_ids: dict[str, int] = {}
        self.named_ranges: dict[str, str] = {}  # range name -> tab title
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, Any]] = []

    @classmethod
    def with_default_layout(cls) -> "FakeSheets":
        sheets = cls()
        sheets.add_range("MF_STOCKS", "MF & Stocks", HOLDINGS_HEADER, sheet_id=101)
        sheets.add_range("IDEAL_ALLOCATION", "Ideal", ["sector", "target_pct"], sheet_id=102)
        sheets.add_range("MONTHLY_GROWTH", "Growth", ["month", "account", "pnl"], sheet_id=103)
        sheets.add_range(
            "SNAPSHOT",
            "Snapshots",
            ["date", "sector", "actual_pct", "target_pct", "variance", "total_value"],
            sheet_id=104,
        )
        return sheets

    def add_range(self, name: str, title: str, header: list[str], sheet_id: int) -> None:
        self.tabs[title] = [list(header)]
        self.sheet_ids[title] = sheet_id
        self.named_ranges[name] = title

    def rows(self, name: str) -> list[list[Any]]:
        """Data rows of a named range, header excluded."""
        return self.tabs[self.named_ranges[name]][1:]

    def seed(self, name: str, rows: list[list[Any]]) -> None:
        self.tabs[self.named_ranges[name]].extend(copy.deepcopy(rows))

    def fail(self, method: str, exc: Exception) -> None:
        """Make every later call to ``method`` raise ``exc``."""
        self.failures[method] = exc

    def _check(self, method: str, *args) -> None:
        self.calls.append((method, args))
        if method in self.failures:
            raise self.failures[method]

    def _tab_for(self, range_ref: str) -> tuple[list[list[Any]], int | None]:
        if range_ref in self.named_ranges:
            return self.tabs[self.named_ranges[range_ref]], None
        match = ROW_REF.match(range_ref)
        if match:
            title = match.group("title").replace("''", "'")
            if title in self.tabs:
                return self.tabs[title], int(match.group("row"))
        raise UpstreamRangeError(400, f"Unable to parse range: {range_ref}")

    async def get(self, range_name: str) -> list[list[Any]]:
        self._check("get", range_name)
        tab, row = self._tab_for(range_name)
        if row is None:
            return copy.deepcopy(tab)
        return [copy.deepcopy(tab[row - 1])] if row <= len(tab) else []

    async def append(self, range_name: str, rows: list[list[Any]]) -> None:
        self._check("append", range_name, rows)
        tab, _ = self._tab_for(range_name)
        tab.extend(copy.deepcopy(rows))

    async def update(self, range_ref: str, rows: list[list[Any]]) -> None:
        self._check("update", range_ref, rows)
        tab, row = self._tab_for(range_ref)
        tab[row - 1] = copy.deepcopy(rows[0])

    async def batch_delete(self, sheet_id: int, start_index: int, end_index: int) -> None:
        self._check("batch_delete", sheet_id, start_index, end_index)
        title = next(t for t, i in self.sheet_ids.items() if i == sheet_id)
        del self.tabs[title][start_index:end_index]

    async def resolve_table_id(self, title: str) -> int:
        self._check("resolve_table_id", title)
        if title not in self.sheet_ids:
            raise UpstreamRangeError(400, f"Unable to parse range: no sheet titled {title!r}")
        return self.sheet_ids[title]


def holding_row(
    holding_id: str,
    symbol: str = "VTI",
    sector: str = "equity",
    qty: float = 10,
    avg_price: float = 200,
    current_price: float = 250,
    allocation_pct: float = 50,
    rsi: float | str = "",
    notes: str = "",
    updated_at: str = "2024-01-15T10:00:00+00:00",
) -> list[Any]:
    """Build a holdings row the way the sheet stores it."""
    return [
        holding_id, symbol, f"{symbol} fund", sector, qty, avg_price, current_price,
        qty * current_price, rsi, allocation_pct, notes, updated_at,
    ]


@pytest.fixture
def settings():
    """Settings for a test deployment."""
    return Settings(
        api_token=API_TOKEN,
        google_client_email="tracker@example.iam.gserviceaccount.com",
        google_private_key="unused",
        spreadsheet_id="spreadsheet-123",
        environment="test",
        rate_limit_max_requests=1000,
    )


@pytest.fixture
def sheets():
    """An empty workbook with the default named ranges."""
    return FakeSheets.with_default_layout()


@pytest.fixture
def book(sheets):
    """Workbook over the fake sheets, for service tests."""
    return Workbook(store=sheets)


@pytest.fixture
def app(settings, sheets):
    return create_app(settings, store=sheets)


@pytest_asyncio.fixture
async def test_client(app):
    """API client that sends the right API key."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"x-api-key": API_TOKEN},
    ) as client:
        yield client


@pytest_asyncio.fixture
async def anon_client(app):
    """API client without credentials."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
