"""End-to-end tests through the HTTP API."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from conftest import API_TOKEN, holding_row
from tracker.errors import SheetsAPIError, UpstreamAuthError, UpstreamRangeError
from tracker.main import create_app

HOLDING_ID = "0b7e5c4a-2f1d-4c7e-9a43-6f2b8d1e3c55"

NEW_HOLDING = {
    "symbol": "VTI",
    "name": "Vanguard Total Stock Market",
    "sector": "equity",
    "qty": 10,
    "avg_price": 200,
    "current_price": 250,
    "allocation_pct": 40,
}


def assert_envelope(response, status_code: int, error: str):
    assert response.status_code == status_code
    body = response.json()
    assert body["error"] == error
    assert body["message"]
    assert body["timestamp"]
    return body


class TestPublicEndpoints:
    """Endpoints that need no API key."""

    @pytest.mark.asyncio
    async def test_health(self, anon_client):
        response = await anon_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert "timestamp" in body

    @pytest.mark.asyncio
    async def test_version(self, anon_client):
        response = await anon_client.get("/version")

        assert response.status_code == 200
        assert response.json()["api_version"] == "v1"

    @pytest.mark.asyncio
    async def test_security_headers(self, anon_client):
        response = await anon_client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"

    @pytest.mark.asyncio
    async def test_unknown_route(self, anon_client):
        response = await anon_client.get("/v2/nothing")

        body = assert_envelope(response, 404, "Not Found")
        assert body["message"] == "Route GET /v2/nothing not found"

    @pytest.mark.asyncio
    async def test_unsupported_method(self, test_client):
        response = await test_client.patch("/v1/holdings")

        body = assert_envelope(response, 404, "Not Found")
        assert body["message"] == "Route PATCH /v1/holdings not found"


class TestAuthentication:
    """API key checks on /v1."""

    @pytest.mark.asyncio
    async def test_missing_key(self, anon_client, sheets):
        response = await anon_client.get("/v1/holdings")

        assert_envelope(response, 401, "Unauthorized")
        assert sheets.calls == []

    @pytest.mark.asyncio
    async def test_wrong_key(self, anon_client):
        response = await anon_client.get("/v1/summary", headers={"x-api-key": "nope"})

        body = assert_envelope(response, 401, "Unauthorized")
        assert body["message"] == "Invalid or missing API key"

    @pytest.mark.asyncio
    async def test_non_ascii_key(self, anon_client):
        response = await anon_client.get(
            "/v1/holdings", headers={"x-api-key": "café".encode("latin-1")}
        )

        assert_envelope(response, 401, "Unauthorized")

    @pytest.mark.asyncio
    async def test_right_key(self, anon_client):
        response = await anon_client.get("/v1/holdings", headers={"x-api-key": API_TOKEN})

        assert response.status_code == 200


class TestHoldingRoutes:
    """Holding CRUD over HTTP."""

    @pytest.mark.asyncio
    async def test_create_list_update_delete(self, test_client, sheets):
        response = await test_client.post("/v1/holdings", json=NEW_HOLDING)
        assert response.status_code == 201
        created = response.json()
        assert created["value"] == 2500
        assert created["rsi"] is None
        assert created["notes"] == ""

        response = await test_client.get("/v1/holdings")
        assert response.status_code == 200
        assert [h["id"] for h in response.json()] == [created["id"]]

        response = await test_client.put(
            f"/v1/holdings/{created['id']}", json={"current_price": 300}
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["value"] == 3000
        assert updated["qty"] == 10

        response = await test_client.delete(f"/v1/holdings/{created['id']}")
        assert response.status_code == 204
        assert response.content == b""
        assert sheets.rows("MF_STOCKS") == []

    @pytest.mark.asyncio
    async def test_update_with_null_keeps_field(self, test_client, sheets):
        sheets.seed("MF_STOCKS", [holding_row(HOLDING_ID, notes="keep")])

        response = await test_client.put(f"/v1/holdings/{HOLDING_ID}", json={"notes": None})

        assert response.status_code == 200
        assert response.json()["notes"] == "keep"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "changes",
        [
            {"qty": 0},
            {"qty": -5},
            {"allocation_pct": 101},
            {"rsi": 150},
            {"symbol": ""},
            {"qty": 1e308, "current_price": 1e308},
            {"avg_price": 1e16},
            {"qty": "10"},
            {"allocation_pct": "40"},
        ],
    )
    async def test_create_validation(self, test_client, sheets, changes):
        response = await test_client.post("/v1/holdings", json={**NEW_HOLDING, **changes})

        body = assert_envelope(response, 400, "Validation Error")
        assert body["message"].startswith("Invalid request data")
        assert sheets.rows("MF_STOCKS") == []

    @pytest.mark.asyncio
    async def test_missing_field(self, test_client):
        payload = {k: v for k, v in NEW_HOLDING.items() if k != "sector"}

        response = await test_client.post("/v1/holdings", json=payload)

        body = assert_envelope(response, 400, "Validation Error")
        assert "sector" in body["message"]

    @pytest.mark.asyncio
    async def test_update_rejects_text_numbers(self, test_client, sheets):
        sheets.seed("MF_STOCKS", [holding_row(HOLDING_ID)])

        response = await test_client.put(f"/v1/holdings/{HOLDING_ID}", json={"qty": "5"})

        assert_envelope(response, 400, "Validation Error")
        assert sheets.rows("MF_STOCKS")[0][4] == 10

    @pytest.mark.asyncio
    async def test_malformed_id(self, test_client):
        response = await test_client.put("/v1/holdings/not-a-uuid", json={"qty": 1})

        assert_envelope(response, 400, "Validation Error")

    @pytest.mark.asyncio
    async def test_unknown_id_is_a_server_error(self, test_client, sheets):
        sheets.seed("MF_STOCKS", [holding_row(HOLDING_ID)])

        response = await test_client.delete("/v1/holdings/6f1f7c0e-8a5b-4d2e-b3a1-0c9d8e7f6a5b")

        assert_envelope(response, 500, "Internal Server Error")
        assert len(sheets.rows("MF_STOCKS")) == 1


class TestGrowthRoutes:
    """Monthly growth over HTTP."""

    @pytest.mark.asyncio
    async def test_add_and_list(self, test_client):
        response = await test_client.post(
            "/v1/monthly-growth", json={"month": "2024-05", "account": "ira", "pnl": -12.5}
        )
        assert response.status_code == 201
        assert response.json() == {"month": "2024-05", "account": "ira", "pnl": -12.5}

        response = await test_client.get("/v1/monthly-growth")
        assert response.json() == [{"month": "2024-05", "account": "ira", "pnl": -12.5}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("month", ["2024-13", "2024-00", "2024-5", "May 2024"])
    async def test_bad_month(self, test_client, sheets, month):
        response = await test_client.post(
            "/v1/monthly-growth", json={"month": month, "account": "ira", "pnl": 1}
        )

        assert_envelope(response, 400, "Validation Error")
        assert sheets.rows("MONTHLY_GROWTH") == []

    @pytest.mark.asyncio
    async def test_pnl_as_text(self, test_client, sheets):
        response = await test_client.post(
            "/v1/monthly-growth", json={"month": "2024-05", "account": "ira", "pnl": "12.5"}
        )

        assert_envelope(response, 400, "Validation Error")
        assert sheets.rows("MONTHLY_GROWTH") == []


class TestAllocationAndSnapshots:
    """Targets, snapshots and the summary over HTTP."""

    @pytest.fixture(autouse=True)
    def seed(self, sheets):
        sheets.seed(
            "MF_STOCKS",
            [
                holding_row(HOLDING_ID, sector="equity", qty=10, current_price=100),
                holding_row("b", sector="bonds", qty=5, current_price=100),
            ],
        )
        sheets.seed("IDEAL_ALLOCATION", [["equity", 60], ["bonds", 40]])

    @pytest.mark.asyncio
    async def test_ideal_allocation(self, test_client):
        response = await test_client.get("/v1/ideal-allocation")

        assert response.status_code == 200
        assert response.json() == [
            {"sector": "equity", "target_pct": 60},
            {"sector": "bonds", "target_pct": 40},
        ]

    @pytest.mark.asyncio
    async def test_snapshot_then_list(self, test_client):
        response = await test_client.post("/v1/snapshot")

        assert response.status_code == 201
        written = response.json()
        assert [s["sector"] for s in written] == ["equity", "bonds"]
        assert written[0]["actual_pct"] == pytest.approx(66.6667, abs=1e-3)
        assert written[0]["variance"] == pytest.approx(6.6667, abs=1e-3)
        assert written[1]["total_value"] == 1500

        response = await test_client.get("/v1/snapshots")
        assert len(response.json()) == 2

    @pytest.mark.asyncio
    async def test_summary(self, test_client):
        response = await test_client.get("/v1/summary")

        assert response.status_code == 200
        body = response.json()
        assert body["current_net_worth"] == 1500
        assert body["allocation_variance"]["bonds"] == pytest.approx(-6.6667, abs=1e-3)
        assert body["monthly_trend"] == []


class TestUpstreamErrors:
    """Sheets failures rendered as error envelopes."""

    @pytest.mark.asyncio
    async def test_range_error(self, test_client, sheets):
        sheets.fail("get", UpstreamRangeError(400, "Unable to parse range: MF_STOCKS"))

        response = await test_client.get("/v1/holdings")

        body = assert_envelope(response, 400, "Sheets Error")
        assert body["message"] == "Invalid sheet range or named range not found"

    @pytest.mark.asyncio
    async def test_auth_error(self, test_client, sheets):
        sheets.fail("get", UpstreamAuthError(401, "Google authentication failed: bad key"))

        response = await test_client.get("/v1/summary")

        body = assert_envelope(response, 500, "Authentication Error")
        assert body["message"] == "Failed to authenticate with Google Sheets"

    @pytest.mark.asyncio
    async def test_generic_error_hides_detail(self, test_client, sheets):
        sheets.fail("append", SheetsAPIError(503, "Sheets API error 503: backend down"))

        response = await test_client.post("/v1/holdings", json=NEW_HOLDING)

        body = assert_envelope(response, 500, "Internal Server Error")
        assert body["message"] == "An unexpected error occurred"

    @pytest.mark.asyncio
    async def test_unexpected_exception(self, test_client, sheets):
        sheets.fail("get", RuntimeError("boom"))

        response = await test_client.get("/v1/ideal-allocation")

        assert_envelope(response, 500, "Internal Server Error")

    @pytest.mark.asyncio
    async def test_development_shows_detail(self, settings, sheets):
        settings.environment = "development"
        sheets.fail("get", RuntimeError("boom"))
        app = create_app(settings, store=sheets)

        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            headers={"x-api-key": API_TOKEN},
        ) as client:
            response = await client.get("/v1/monthly-growth")

        body = assert_envelope(response, 500, "Internal Server Error")
        assert body["message"] == "boom"


class TestRateLimit:
    """Deployment-wide request quota."""

    @pytest_asyncio.fixture
    async def limited_client(self, settings, sheets):
        settings.rate_limit_max_requests = 2
        app = create_app(settings, store=sheets)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client

    @pytest.mark.asyncio
    async def test_quota_exceeded(self, limited_client):
        first = await limited_client.get("/health")
        await limited_client.get("/health")
        third = await limited_client.get("/health")

        assert first.headers["RateLimit-Limit"] == "2"
        assert first.headers["RateLimit-Remaining"] == "1"
        body = assert_envelope(third, 429, "Too Many Requests")
        assert body["message"] == "Rate limit exceeded, please try again later"
        assert third.headers["X-Content-Type-Options"] == "nosniff"
