"""
Driver Telemetry API: Driver Route Handlers
==============================================

What:  POST /conductor, GET /conductor/all and DELETE /conductor/all.
How:   Thin handlers: take the body, call the service with the injected
       store, wrap the result in the response envelope.
"""

import logging

from fastapi import APIRouter, Depends, status

from driver_telemetry.database import Store, get_store
from driver_telemetry.schemas.common import (
    CreatedResponse,
    ErrorResponse,
    ListResponse,
    PurgeResponse,
)
from driver_telemetry.schemas.driver import DriverCreate, DriverResponse
from driver_telemetry.services.driver_service import driver_service
from driver_telemetry.services.purge_service import purge_all

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conductor", tags=["Drivers"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CreatedResponse[DriverResponse],
    responses={
        400: {"description": "Missing or invalid field", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Register a driver",
)
async def create_driver(
    payload: DriverCreate,
    store: Store = Depends(get_store),
) -> CreatedResponse[DriverResponse]:
    driver = await driver_service.create_driver(store, payload)
    return CreatedResponse[DriverResponse](
        message="Conductor creado",
        data=DriverResponse.model_validate(driver),
    )


@router.get(
    "/all",
    response_model=ListResponse[DriverResponse],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List all drivers, newest first",
)
async def list_drivers(store: Store = Depends(get_store)) -> ListResponse[DriverResponse]:
    drivers = await driver_service.list_drivers(store)
    return ListResponse[DriverResponse](
        total=len(drivers),
        data=[DriverResponse.model_validate(d) for d in drivers],
    )


@router.delete(
    "/all",
    response_model=PurgeResponse,
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="Delete every driver and every reading",
    description="Irreversible. Intended for test environments only.",
)
async def delete_everything(store: Store = Depends(get_store)) -> PurgeResponse:
    return await purge_all(store)
