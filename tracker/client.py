"""HTTP client for the portfolio tracker API."""

from typing import Any

import httpx


class APIError(Exception):
    """API request error."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}")


class TrackerClient:
    """Client for the portfolio tracker API."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        api_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Make an HTTP request."""
        headers = kwargs.pop("headers", {})
        if self.api_key:
            headers["x-api-key"] = self.api_key

        with httpx.Client(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        ) as client:
            response = client.request(method, path, headers=headers, **kwargs)

        if response.status_code >= 400:
            try:
                detail = response.json().get("message", response.text)
            except ValueError:
                detail = response.text
            raise APIError(response.status_code, detail)

        if response.status_code == 204:
            return None
        return response.json()

    def health(self) -> dict:
        """Check health status."""
        return self._request("GET", "/health")

    # Holding endpoints
    def list_holdings(self) -> list[dict]:
        return self._request("GET", "/v1/holdings")

    def create_holding(self, **fields) -> dict:
        return self._request("POST", "/v1/holdings", json=fields)

    def update_holding(self, holding_id: str, **changes) -> dict:
        return self._request("PUT", f"/v1/holdings/{holding_id}", json=changes)

    def delete_holding(self, holding_id: str) -> None:
        self._request("DELETE", f"/v1/holdings/{holding_id}")

    # Allocation, growth and snapshot endpoints
    def get_ideal_allocation(self) -> list[dict]:
        return self._request("GET", "/v1/ideal-allocation")

    def list_monthly_growth(self) -> list[dict]:
        return self._request("GET", "/v1/monthly-growth")

    def add_monthly_growth(self, month: str, account: str, pnl: float) -> dict:
        return self._request(
            "POST",
            "/v1/monthly-growth",
            json={"month": month, "account": account, "pnl": pnl},
        )

    def create_snapshot(self) -> list[dict]:
        return self._request("POST", "/v1/snapshot")

    def list_snapshots(self) -> list[dict]:
        return self._request("GET", "/v1/snapshots")

    def get_summary(self) -> dict:
        return self._request("GET", "/v1/summary")
