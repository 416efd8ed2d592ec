"""
Driver Telemetry API: Reading Service Unit Tests
===================================================

What we test:
    ✅ Zero is a valid value for every reading kind
    ✅ Missing driver id / values and non-numeric values are rejected
    ✅ latest() raises NotFoundError until a reading exists
    ✅ latest_combined() fills present kinds, nulls absent ones, 404s on none
    ✅ latest_combined() starts all three lookups before awaiting any
    ✅ Store failures surface as StoreError
"""

import asyncio
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from driver_telemetry.exceptions import NotFoundError, StoreError, ValidationError
from driver_telemetry.services import reading_service
from driver_telemetry.services.reading_service import (
    compass_service,
    heart_rate_service,
    latest_combined,
    location_service,
)

ZERO_VALUES = [
    (heart_rate_service, {"bpm": 0}),
    (compass_service, {"heading": 0}),
    (location_service, {"latitude": 0, "longitude": 0}),
]


class TestReadingValidation:

    @pytest.mark.parametrize("service,values", ZERO_VALUES)
    def test_zero_is_present(self, service, values):
        service.validate("D1", values)

    @pytest.mark.parametrize("service,values", ZERO_VALUES)
    @pytest.mark.parametrize("driver_id", [None, ""])
    def test_missing_driver_id_rejected(self, service, values, driver_id):
        with pytest.raises(ValidationError) as exc_info:
            service.validate(driver_id, values)
        assert exc_info.value.message == service.kind.required_message

    def test_location_requires_both_coordinates(self):
        with pytest.raises(ValidationError) as exc_info:
            location_service.validate("D1", {"latitude": 4.6})
        assert exc_info.value.field == "longitude"

    @pytest.mark.parametrize("bad", [
        "72", True, None, float("nan"), float("inf"), -float("inf"), 10 ** 400,
    ])
    def test_non_numeric_bpm_rejected(self, bad):
        with pytest.raises(ValidationError):
            heart_rate_service.validate("D1", {"bpm": bad})

    def test_negative_bpm_rejected(self):
        with pytest.raises(ValidationError):
            heart_rate_service.validate("D1", {"bpm": -5})

    def test_compass_heading_not_range_checked(self):
        compass_service.validate("D1", {"heading": -90})
        compass_service.validate("D1", {"heading": 725.5})


class TestReadingPersistence:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("service,values", ZERO_VALUES)
    async def test_record_zero_reading(self, store, service, values):
        reading = await service.record(store, "D1", values)

        for name, value in values.items():
            assert getattr(reading, name) == value
        assert reading.driver_id == "D1"
        assert reading.recorded_at is not None

    @pytest.mark.asyncio
    async def test_latest_not_found_then_found(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            await heart_rate_service.latest(store, "D1")
        assert exc_info.value.message == "Sin lecturas de ritmo"

        recorded = await heart_rate_service.record(store, "D1", {"bpm": 80})
        latest = await heart_rate_service.latest(store, "D1")

        assert latest.id == recorded.id
        assert latest.bpm == 80

    @pytest.mark.asyncio
    async def test_latest_returns_most_recent_for_driver(self, store):
        await compass_service.record(store, "D1", {"heading": 10})
        newest = await compass_service.record(store, "D1", {"heading": 20})
        await compass_service.record(store, "D2", {"heading": 30})

        latest = await compass_service.latest(store, "D1")

        assert latest.id == newest.id

    @pytest.mark.asyncio
    async def test_list_all_newest_first(self, store):
        a = await location_service.record(store, "D1", {"latitude": 1, "longitude": 2})
        b = await location_service.record(store, "D2", {"latitude": 3, "longitude": 4})

        readings = await location_service.list_all(store)

        assert [r.id for r in readings] == [b.id, a.id]

    @pytest.mark.asyncio
    async def test_unknown_driver_is_accepted(self, store):
        reading = await heart_rate_service.record(store, "never-registered", {"bpm": 60})
        assert reading.driver_id == "never-registered"

    @pytest.mark.asyncio
    async def test_store_failure_wrapped(self, mock_store, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("database is locked")
        )

        with pytest.raises(StoreError) as exc_info:
            await compass_service.list_all(mock_store)

        assert "database is locked" in exc_info.value.message


class TestLatestCombined:

    @pytest.mark.asyncio
    async def test_only_heart_rate(self, store):
        await heart_rate_service.record(store, "D1", {"bpm": 72})

        result = await latest_combined(store, "D1")

        assert result.driver_id == "D1"
        assert result.heart_rate.bpm == 72
        assert result.compass is None
        assert result.location is None

    @pytest.mark.asyncio
    async def test_all_kinds(self, store):
        await heart_rate_service.record(store, "D1", {"bpm": 65})
        await compass_service.record(store, "D1", {"heading": 180})
        await location_service.record(store, "D1", {"latitude": -12.05, "longitude": -77.04})

        result = await latest_combined(store, "D1")

        assert result.heart_rate.bpm == 65
        assert result.compass.heading == 180
        assert result.location.latitude == -12.05
        assert result.location.longitude == -77.04

    @pytest.mark.asyncio
    async def test_no_readings(self, store):
        with pytest.raises(NotFoundError):
            await latest_combined(store, "D1")

    @pytest.mark.asyncio
    async def test_lookups_start_before_any_completes(self, mock_store):
        started = []
        release = asyncio.Event()

        def slow_lookup(name):
            async def lookup(store, driver_id):
                started.append(name)
                await release.wait()
                return None
            return lookup

        with patch.object(heart_rate_service, "find_latest", slow_lookup("heart_rate")), \
             patch.object(compass_service, "find_latest", slow_lookup("compass")), \
             patch.object(location_service, "find_latest", slow_lookup("location")):
            task = asyncio.create_task(reading_service.latest_combined(mock_store, "D1"))
            for _ in range(5):
                await asyncio.sleep(0)

            assert sorted(started) == ["compass", "heart_rate", "location"]
            assert not task.done()

            release.set()
            with pytest.raises(NotFoundError):
                await task

    @pytest.mark.asyncio
    async def test_failure_raised_after_all_lookups_finish(self, mock_store):
        release = asyncio.Event()
        finished = []

        async def failing(store, driver_id):
            raise StoreError(message="boom")

        async def slow(store, driver_id):
            await release.wait()
            finished.append(True)
            return None

        with patch.object(heart_rate_service, "find_latest", failing), \
             patch.object(compass_service, "find_latest", slow), \
             patch.object(location_service, "find_latest", slow):
            task = asyncio.create_task(latest_combined(mock_store, "D1"))
            for _ in range(5):
                await asyncio.sleep(0)
            assert not task.done()

            release.set()
            with pytest.raises(StoreError):
                await task
            assert len(finished) == 2
