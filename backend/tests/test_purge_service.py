"""
Driver Telemetry API: Purge Service Unit Tests
=================================================

What we test:
    ✅ Purge reports per-kind deleted counts
    ✅ Every listing is empty afterwards
    ✅ Purging an empty store reports zeros
"""

import pytest

from driver_telemetry.schemas.driver import DriverCreate
from driver_telemetry.services.driver_service import driver_service
from driver_telemetry.services.purge_service import purge_all
from driver_telemetry.services.reading_service import (
    compass_service,
    heart_rate_service,
    location_service,
)


@pytest.mark.asyncio
async def test_purge_all_counts_and_empties(store, driver_payload):
    await driver_service.create_driver(store, DriverCreate.model_validate(driver_payload))
    await heart_rate_service.record(store, "D1", {"bpm": 70})
    await heart_rate_service.record(store, "D2", {"bpm": 90})
    await compass_service.record(store, "D1", {"heading": 45})
    await location_service.record(store, "D1", {"latitude": 19.4, "longitude": -99.1})

    result = await purge_all(store)

    assert result.drivers_deleted == 1
    assert result.heart_rate_deleted == 2
    assert result.compass_deleted == 1
    assert result.location_deleted == 1

    assert await driver_service.list_drivers(store) == []
    assert await heart_rate_service.list_all(store) == []
    assert await compass_service.list_all(store) == []
    assert await location_service.list_all(store) == []


@pytest.mark.asyncio
async def test_purge_empty_store(store):
    result = await purge_all(store)

    assert result.model_dump(by_alias=True) == {
        "message": "Todos los conductores y lecturas han sido borrados",
        "conductoresBorrados": 0,
        "ritmosBorrados": 0,
        "brujulaBorrados": 0,
        "ubicacionBorrados": 0,
    }
