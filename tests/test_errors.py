"""Tests for exception classification."""

import pytest

from tracker.errors import (
    NotFoundError,
    SheetsAPIError,
    UpstreamAuthError,
    UpstreamRangeError,
    classify_exception,
    error_body,
)


@pytest.mark.parametrize(
    "exc",
    [
        UpstreamRangeError(400, "Unable to parse range: X"),
        ValueError("Unable to parse range: Y"),
    ],
)
def test_range_errors(exc):
    status_code, error, _ = classify_exception(exc, development=False)

    assert (status_code, error) == (400, "Sheets Error")


@pytest.mark.parametrize(
    "exc",
    [
        UpstreamAuthError(401, "Google authentication failed: bad key"),
        RuntimeError("permission denied for service account"),
    ],
)
def test_auth_errors(exc):
    status_code, error, message = classify_exception(exc, development=False)

    assert (status_code, error) == (500, "Authentication Error")
    assert message == "Failed to authenticate with Google Sheets"


def test_generic_error_detail_only_in_development():
    exc = SheetsAPIError(503, "Sheets API error 503: backend down")

    assert classify_exception(exc, development=True)[2] == "Sheets API error 503: backend down"
    assert classify_exception(exc, development=False)[2] == "An unexpected error occurred"


def test_not_found_is_generic():
    status_code, error, _ = classify_exception(NotFoundError("Holding with ID x not found"), False)

    assert (status_code, error) == (500, "Internal Server Error")


def test_error_body_fields():
    body = error_body("Sheets Error", "bad range")

    assert body["error"] == "Sheets Error"
    assert body["message"] == "bad range"
    assert body["timestamp"].endswith("+00:00")
