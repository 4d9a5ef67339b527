"""Error taxonomy and the HTTP error envelope.

Services and the Sheets client raise; nothing between them and the HTTP
boundary catches. The handlers registered here turn every failure into the
same ``{error, message, timestamp}`` body.
"""

import logging
from datetime import UTC, datetime
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tracker import telemetry

logger = logging.getLogger(__name__)

RANGE_ERROR_MARKER = "Unable to parse range"
AUTH_ERROR_MARKERS = ("authentication", "permission")


class TrackerError(Exception):
    """Base class for errors raised by the tracker."""


class NotFoundError(TrackerError):
    """A referenced record is not in the row index, even after a rebuild."""


class SheetsAPIError(TrackerError):
    """The Sheets API answered with an error status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class UpstreamRangeError(SheetsAPIError):
    """A named range or sheet is missing or malformed in the spreadsheet."""


class UpstreamAuthError(SheetsAPIError):
    """The Sheets API rejected our credentials."""


def error_body(error: str, message: str) -> dict:
    """Build the uniform error envelope."""
    return {
        "error": error,
        "message": message,
        "timestamp": datetime.now(UTC).isoformat(),
    }


def classify_exception(exc: Exception, development: bool) -> tuple[int, str, str]:
    """Map an exception to (status code, error label, client message).

    Classification goes by the exception text, so errors that never passed
    through the Sheets client (a failed token refresh, say) land in the same
    buckets.
    """
    text = str(exc)

    if isinstance(exc, UpstreamRangeError) or RANGE_ERROR_MARKER in text:
        return (
            status.HTTP_400_BAD_REQUEST,
            "Sheets Error",
            "Invalid sheet range or named range not found",
        )

    if isinstance(exc, UpstreamAuthError) or any(m in text for m in AUTH_ERROR_MARKERS):
        return (
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Authentication Error",
            "Failed to authenticate with Google Sheets",
        )

    return (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        text if development else "An unexpected error occurred",
    )


def error_response(request: Request, exc: Exception, development: bool) -> JSONResponse:
    """Log a failed request and render its envelope."""
    status_code, error, message = classify_exception(exc, development)
    if status_code >= 500:
        logger.exception(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    else:
        logger.warning(f"{request.method} {request.url.path} failed: {exc}")

    telemetry.record_error(error)
    return JSONResponse(status_code=status_code, content=error_body(error, message))


def route_not_found(request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=error_body("Not Found", f"Route {request.method} {request.url.path} not found"),
    )


def register_exception_handlers(app: FastAPI, development: bool) -> None:
    """Install the envelope-producing handlers on an application.

    Exceptions outside the tracker's own hierarchy are caught by
    ``catch_unhandled_errors`` in the middleware stack instead, since
    Starlette re-raises anything handled at the ``Exception`` level.
    """

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        problems = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
        logger.warning(f"Validation failed for {request.method} {request.url.path}: {problems}")

        message = "Invalid request data"
        if problems:
            message = f"{message}: {'; '.join(problems)}"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("Validation Error", message),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Unmatched paths and unmatched methods both read as an unknown route
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            return route_not_found(request)
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            return route_not_found(request)

        try:
            label = HTTPStatus(exc.status_code).phrase
        except ValueError:
            label = "Error"
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(label, str(exc.detail)),
            headers=exc.headers,
        )

    @app.exception_handler(TrackerError)
    async def tracker_error_handler(request: Request, exc: TrackerError):
        return error_response(request, exc, development)

    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return error_response(request, exc, development)
