"""
Driver Telemetry API: Driver Request/Response Schemas
========================================================

What:  Pydantic models for driver registration and listing.
How:   Python attribute names are English; the JSON contract keeps the
       Spanish field names of the public API through aliases.

Request fields are all optional at the schema level: presence and
emptiness are checked by DriverService so every missing field yields the
same 400 message. Type mismatches (e.g. `edad: "treinta"`) are rejected
here and reported as 400 by the RequestValidationError handler.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from driver_telemetry.schemas.common import Number


class DriverCreate(BaseModel):
    """Body of POST /conductor."""
    name: Optional[str] = Field(default=None, alias="nombre")
    age: Optional[Number] = Field(default=None, alias="edad")
    sex: Optional[str] = Field(default=None, alias="sexo", description="Masculino | Femenino")
    shift: Optional[str] = Field(default=None, alias="turno")
    condition: Optional[str] = Field(default=None, alias="enfermedad")

    model_config = ConfigDict(populate_by_name=True)


class DriverResponse(BaseModel):
    """A stored driver as returned by the API."""
    id: uuid.UUID = Field(alias="_id")
    name: str = Field(alias="nombre")
    age: float = Field(alias="edad")
    sex: str = Field(alias="sexo")
    shift: str = Field(alias="turno")
    condition: str = Field(alias="enfermedad")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
