"""
Driver Telemetry API: Reading Route Handlers
===============================================

What:  The ingest / latest / list routes of each reading kind, plus the
       combined latest-reading route.
How:   `build_reading_router()` creates the three routes of one kind from
       its service, request schema and response schema. The three kinds
       differ only in those arguments.

Route Inventory:
    POST /ritmo                              GET /ritmo/all
    GET  /ritmo/{conductorId}/latest
    POST /brujula                            GET /brujula/all
    GET  /brujula/{conductorId}/latest
    POST /ubicacion                          GET /ubicacion/all
    GET  /ubicacion/{conductorId}/latest
    GET  /lectura/{conductorId}/latest       (combined)
"""

import logging
from typing import Type

from fastapi import APIRouter, Depends, Path, status

from driver_telemetry.database import Store, get_store
from driver_telemetry.schemas.common import CreatedResponse, ErrorResponse, ListResponse
from driver_telemetry.schemas.reading import (
    CombinedLatestResponse,
    CompassCreate,
    CompassResponse,
    HeartRateCreate,
    HeartRateResponse,
    LocationCreate,
    LocationResponse,
    ReadingCreate,
    ReadingResponse,
)
from driver_telemetry.services.reading_service import (
    ReadingService,
    compass_service,
    heart_rate_service,
    latest_combined,
    location_service,
)

logger = logging.getLogger(__name__)


def build_reading_router(
    prefix: str,
    tag: str,
    service: ReadingService,
    create_schema: Type[ReadingCreate],
    response_schema: Type[ReadingResponse],
) -> APIRouter:
    """
    Create the ingest, latest and list routes for one reading kind.

    Args:
        prefix:           URL prefix, e.g. "/ritmo"
        tag:              OpenAPI tag
        service:          ReadingService bound to the kind
        create_schema:    Pydantic model of the POST body
        response_schema:  Pydantic model of one stored reading
    """
    router = APIRouter(prefix=prefix, tags=[tag])
    value_fields = service.kind.value_fields

    @router.post(
        "",
        status_code=status.HTTP_201_CREATED,
        response_model=CreatedResponse[response_schema],
        responses={
            400: {"description": "Missing or invalid field", "model": ErrorResponse},
            500: {"description": "Store error", "model": ErrorResponse},
        },
        summary=f"Record a {tag.lower()} reading",
    )
    async def record_reading(
        payload: create_schema,
        store: Store = Depends(get_store),
    ):
        values = {name: getattr(payload, name) for name in value_fields}
        reading = await service.record(store, payload.driver_id, values)
        return CreatedResponse[response_schema](
            message=service.kind.saved_message,
            data=response_schema.model_validate(reading),
        )

    @router.get(
        "/all",
        response_model=ListResponse[response_schema],
        responses={500: {"description": "Store error", "model": ErrorResponse}},
        summary=f"List all {tag.lower()} readings, newest first",
    )
    async def list_readings(store: Store = Depends(get_store)):
        readings = await service.list_all(store)
        return ListResponse[response_schema](
            total=len(readings),
            data=[response_schema.model_validate(r) for r in readings],
        )

    @router.get(
        "/{conductorId}/latest",
        response_model=response_schema,
        responses={
            404: {"description": "No readings for this driver", "model": ErrorResponse},
            500: {"description": "Store error", "model": ErrorResponse},
        },
        summary=f"Latest {tag.lower()} reading of a driver",
    )
    async def latest_reading(
        conductorId: str = Path(description="Driver identifier"),
        store: Store = Depends(get_store),
    ):
        reading = await service.latest(store, conductorId)
        return response_schema.model_validate(reading)

    return router


heart_rate_router = build_reading_router(
    "/ritmo", "Heart rate", heart_rate_service, HeartRateCreate, HeartRateResponse
)
compass_router = build_reading_router(
    "/brujula", "Compass", compass_service, CompassCreate, CompassResponse
)
location_router = build_reading_router(
    "/ubicacion", "Location", location_service, LocationCreate, LocationResponse
)

combined_router = APIRouter(prefix="/lectura", tags=["Combined"])


@combined_router.get(
    "/{conductorId}/latest",
    response_model=CombinedLatestResponse,
    responses={
        404: {"description": "No readings of any kind", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Latest heart rate, compass and location of a driver",
    description=(
        "Runs the three latest lookups concurrently. Kinds without readings "
        "are returned as null; 404 only when all three are missing."
    ),
)
async def latest_combined_reading(
    conductorId: str = Path(description="Driver identifier"),
    store: Store = Depends(get_store),
) -> CombinedLatestResponse:
    return await latest_combined(store, conductorId)
