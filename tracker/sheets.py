"""
Google Sheets access for the portfolio tracker.

The spreadsheet is the database: every record lives in a named range whose
first row is a header. ``SheetsClient`` talks to the Sheets v4 REST API with
httpx; service-account tokens come from google-auth.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol
from urllib.parse import quote

import httpx
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from tracker.config import Settings
from tracker.errors import SheetsAPIError, UpstreamAuthError, UpstreamRangeError

logger = logging.getLogger(__name__)

SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets"
SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

Row = list[Any]
TokenProvider = Callable[[], Awaitable[str]]


class RowStore(Protocol):
    """Operations the record services need from the spreadsheet."""

    async def get(self, range_name: str) -> list[Row]: ...

    async def append(self, range_name: str, rows: list[Row]) -> None: ...

    async def update(self, range_ref: str, rows: list[Row]) -> None: ...

    async def batch_delete(self, sheet_id: int, start_index: int, end_index: int) -> None: ...

    async def resolve_table_id(self, title: str) -> int: ...


class ServiceAccountTokens:
    """Access tokens for a Google service account, refreshed on expiry.

    Credentials are built on first use so a malformed key surfaces as a
    request failure rather than preventing startup.
    """

    def __init__(self, client_email: str, private_key: str):
        self.client_email = client_email
        self._private_key = private_key
        self._credentials: service_account.Credentials | None = None

    def _build_credentials(self) -> service_account.Credentials:
        return service_account.Credentials.from_service_account_info(
            {
                "type": "service_account",
                "client_email": self.client_email,
                "private_key": self._private_key,
                "token_uri": TOKEN_URI,
            },
            scopes=SCOPES,
        )

    async def __call__(self) -> str:
        if self._credentials is None:
            try:
                self._credentials = self._build_credentials()
            except ValueError as e:
                raise UpstreamAuthError(401, f"Google authentication failed: {e}") from e

        if not self._credentials.valid:
            try:
                # google-auth refreshes synchronously
                await asyncio.to_thread(self._credentials.refresh, GoogleAuthRequest())
            except RefreshError as e:
                raise UpstreamAuthError(401, f"Google authentication failed: {e}") from e
            logger.info(f"Refreshed Sheets access token for {self.client_email}")

        return self._credentials.token


def error_from_response(response: httpx.Response) -> SheetsAPIError:
    """Build the matching error for a failed Sheets API response."""
    try:
        message = response.json().get("error", {}).get("message", response.text)
    except ValueError:
        message = response.text

    if "Unable to parse range" in message:
        return UpstreamRangeError(response.status_code, message)
    if response.status_code in (401, 403):
        return UpstreamAuthError(
            response.status_code, f"Google Sheets permission denied: {message}"
        )
    return SheetsAPIError(response.status_code, f"Sheets API error {response.status_code}: {message}")


class SheetsClient:
    """Async client for one spreadsheet."""

    def __init__(
        self,
        spreadsheet_id: str,
        token_provider: TokenProvider,
        timeout: float = 30.0,
        base_url: str = SHEETS_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            spreadsheet_id: ID of the spreadsheet holding the named ranges
            token_provider: Coroutine function returning a bearer token
            timeout: Per-request timeout in seconds
            base_url: Sheets API root
            transport: Optional httpx transport (used by tests)
        """
        self.spreadsheet_id = spreadsheet_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token_provider = token_provider
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SheetsClient":
        tokens = ServiceAccountTokens(settings.google_client_email, settings.google_private_key)
        return cls(settings.spreadsheet_id, tokens, timeout=settings.sheets_timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating one if needed."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        token = await self._token_provider()
        url = f"{self.base_url}/{self.spreadsheet_id}{path}"
        response = await self.client.request(
            method, url, headers={"Authorization": f"Bearer {token}"}, **kwargs
        )

        if response.status_code >= 400:
            raise error_from_response(response)
        if not response.content:
            return {}
        return response.json()

    @staticmethod
    def _range_path(range_ref: str) -> str:
        return f"/values/{quote(range_ref, safe='')}"

    async def get(self, range_name: str) -> list[Row]:
        """Read every row of a range, header included."""
        data = await self._request(
            "GET",
            self._range_path(range_name),
            params={
                "valueRenderOption": "UNFORMATTED_VALUE",
                "dateTimeRenderOption": "FORMATTED_STRING",
            },
        )
        return data.get("values", [])

    async def append(self, range_name: str, rows: list[Row]) -> None:
        """Append rows after the last row of a range in a single call."""
        await self._request(
            "POST",
            f"{self._range_path(range_name)}:append",
            params={"valueInputOption": "USER_ENTERED"},
            json={"values": rows},
        )

    async def update(self, range_ref: str, rows: list[Row]) -> None:
        """Overwrite the cells of an A1 range."""
        await self._request(
            "PUT",
            self._range_path(range_ref),
            params={"valueInputOption": "USER_ENTERED"},
            json={"values": rows},
        )

    async def batch_delete(self, sheet_id: int, start_index: int, end_index: int) -> None:
        """Delete rows [start_index, end_index) of a sheet (0-indexed)."""
        await self._request(
            "POST",
            ":batchUpdate",
            json={
                "requests": [
                    {
                        "deleteDimension": {
                            "range": {
                                "sheetId": sheet_id,
                                "dimension": "ROWS",
                                "startIndex": start_index,
                                "endIndex": end_index,
                            }
                        }
                    }
                ]
            },
        )

    async def resolve_table_id(self, title: str) -> int:
        """Look up the numeric sheet id of a tab by its title.

        Raises:
            UpstreamRangeError: If no tab has that title
        """
        data = await self._request("GET", "", params={"fields": "sheets.properties"})
        for sheet in data.get("sheets", []):
            properties = sheet.get("properties", {})
            if properties.get("title") == title:
                return properties.get("sheetId", 0)
        raise UpstreamRangeError(400, f"Unable to parse range: no sheet titled {title!r}")


def a1_row_range(sheet_title: str, row: int, first_column: str, last_column: str) -> str:
    """A1 reference for a single row, e.g. ``'MF & Stocks'!A5:L5``."""
    escaped = sheet_title.replace("'", "''")
    return f"'{escaped}'!{first_column}{row}:{last_column}{row}"
