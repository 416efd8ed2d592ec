"""
Driver Telemetry API: Reading Request/Response Schemas
=========================================================

What:  Pydantic models for the three reading kinds and the combined
       latest-reading response.

Request models:
    One per kind, so each POST route documents and type-checks its own
    fields. Values are `Number` (strict int/float): `"72"` or `true` are
    rejected, `0` is accepted.

Response models:
    `ReadingResponse` carries the common columns; each kind adds its value
    fields. Snapshot models are the reduced `{value, fecha}` shapes used
    inside the combined response.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from driver_telemetry.schemas.common import Number


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ReadingCreate(BaseModel):
    driver_id: Optional[str] = Field(default=None, alias="conductorId")

    model_config = ConfigDict(populate_by_name=True)


class HeartRateCreate(ReadingCreate):
    """Body of POST /ritmo."""
    bpm: Optional[Number] = Field(default=None, description="Beats per minute (>= 0)")


class CompassCreate(ReadingCreate):
    """Body of POST /brujula."""
    heading: Optional[Number] = Field(default=None, alias="compass", description="Degrees")


class LocationCreate(ReadingCreate):
    """Body of POST /ubicacion."""
    latitude: Optional[Number] = Field(default=None, alias="latitud")
    longitude: Optional[Number] = Field(default=None, alias="longitud")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ReadingResponse(BaseModel):
    id: uuid.UUID = Field(alias="_id")
    driver_id: str = Field(alias="conductorId")
    recorded_at: datetime = Field(alias="fecha")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class HeartRateResponse(ReadingResponse):
    bpm: float


class CompassResponse(ReadingResponse):
    heading: float = Field(alias="compass")


class LocationResponse(ReadingResponse):
    latitude: float = Field(alias="latitud")
    longitude: float = Field(alias="longitud")


# ══════════════════════════════════════════════════════════════════════════
# Combined Latest Reading
# ══════════════════════════════════════════════════════════════════════════


class HeartRateSnapshot(BaseModel):
    bpm: float
    recorded_at: datetime = Field(alias="fecha")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CompassSnapshot(BaseModel):
    heading: float = Field(alias="compass")
    recorded_at: datetime = Field(alias="fecha")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class LocationSnapshot(BaseModel):
    latitude: float = Field(alias="latitud")
    longitude: float = Field(alias="longitud")
    recorded_at: datetime = Field(alias="fecha")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CombinedLatestResponse(BaseModel):
    """
    Latest reading of every kind for one driver.

    A kind with no readings is returned as an explicit `null`.

    Example:
        {
            "conductorId": "D1",
            "ritmo": {"bpm": 72.0, "fecha": "2026-10-19T12:00:00Z"},
            "brujula": null,
            "ubicacion": null
        }
    """
    driver_id: str = Field(alias="conductorId")
    heart_rate: Optional[HeartRateSnapshot] = Field(default=None, alias="ritmo")
    compass: Optional[CompassSnapshot] = Field(default=None, alias="brujula")
    location: Optional[LocationSnapshot] = Field(default=None, alias="ubicacion")

    model_config = ConfigDict(populate_by_name=True)
