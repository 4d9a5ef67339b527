"""Shared schema types."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer

# Largest quantity or unit price accepted; keeps qty * price well inside float range
MAX_AMOUNT = Decimal("1e15")


def _require_json_number(value: Any) -> Any:
    if isinstance(value, (str, bool)):
        raise ValueError("must be a number, not a string or boolean")
    return value


# Request input: JSON numbers only, parsed straight to Decimal
NumberIn = Annotated[Decimal, BeforeValidator(_require_json_number)]

# Decimal in memory, plain JSON number on the wire
Number = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str = Field(..., description="Short error label, e.g. 'Validation Error'")
    message: str = Field(..., description="Human-readable detail")
    timestamp: datetime = Field(..., description="When the error was produced (UTC)")
