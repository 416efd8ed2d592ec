"""
Driver Telemetry API: Shared Response Schemas
================================================

What:  Envelopes and system responses used by more than one route module.
How:   Generic wrappers are parameterized by the record schema, so
       `ListResponse[HeartRateResponse]` documents the exact item shape in
       the OpenAPI output.
"""

import math
from datetime import datetime
from typing import Annotated, Any, Generic, List, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt

T = TypeVar("T")

# JSON number that rejects strings, booleans, NaN and Infinity
Number = Union[StrictInt, Annotated[float, Field(strict=True, allow_inf_nan=False)]]


def is_number(value: Any) -> bool:
    """True for an int or float that converts to a finite float."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


# ══════════════════════════════════════════════════════════════════════════
# Envelopes
# ══════════════════════════════════════════════════════════════════════════


class CreatedResponse(BaseModel, Generic[T]):
    """Returned with HTTP 201 by every POST route."""
    message: str = Field(description="Human-readable confirmation")
    data: T = Field(description="The stored record")


class ListResponse(BaseModel, Generic[T]):
    """Returned by every `/all` listing, most recent record first."""
    total: int = Field(description="Number of records in `data`")
    data: List[T] = Field(description="Records ordered by creation time, newest first")


# ══════════════════════════════════════════════════════════════════════════
# System Responses
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error format shared by every endpoint.

    Example:
        {"error": "Sin lecturas de ritmo"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Process and store status returned by GET /health."""
    status: str = Field(description="Always 'ok' while the process is serving")
    store_connected: bool = Field(
        alias="storeConnected",
        description="Result of a live round-trip to the store",
    )
    uptime: float = Field(description="Seconds since the process started")
    now: datetime = Field(description="Current server time (UTC)")

    model_config = ConfigDict(populate_by_name=True)


class PurgeResponse(BaseModel):
    """Per-kind deleted counts returned by DELETE /conductor/all."""
    message: str
    drivers_deleted: int = Field(alias="conductoresBorrados")
    heart_rate_deleted: int = Field(alias="ritmosBorrados")
    compass_deleted: int = Field(alias="brujulaBorrados")
    location_deleted: int = Field(alias="ubicacionBorrados")

    model_config = ConfigDict(populate_by_name=True)
