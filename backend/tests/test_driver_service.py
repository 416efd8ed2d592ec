"""
Driver Telemetry API: Driver Service Unit Tests
==================================================

What we test:
    ✅ Validation of registration payloads (missing, empty, zero age, enum)
    ✅ Create followed by list returns the new driver first
    ✅ Store failures surface as StoreError with the driver message
"""

import pytest
from sqlalchemy.exc import OperationalError

from driver_telemetry.exceptions import StoreError, ValidationError
from driver_telemetry.schemas.driver import DriverCreate
from driver_telemetry.services.driver_service import DriverService, MISSING_FIELDS_MESSAGE


def make_payload(**overrides) -> DriverCreate:
    data = {
        "nombre": "Luis Pérez",
        "edad": 41,
        "sexo": "Masculino",
        "turno": "Diurno",
        "enfermedad": "Hipertensión",
    }
    data.update(overrides)
    return DriverCreate.model_validate(data)


class TestDriverValidation:

    def setup_method(self):
        self.service = DriverService()

    @pytest.mark.parametrize("field", ["nombre", "edad", "sexo", "turno", "enfermedad"])
    def test_missing_field_rejected(self, field):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate(make_payload(**{field: None}))
        assert exc_info.value.message == MISSING_FIELDS_MESSAGE

    @pytest.mark.parametrize("field", ["nombre", "turno", "enfermedad"])
    def test_blank_string_rejected(self, field):
        with pytest.raises(ValidationError):
            self.service.validate(make_payload(**{field: "   "}))

    def test_zero_age_is_valid(self):
        result = self.service.validate(make_payload(edad=0))
        assert result.age == 0

    def test_negative_age_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate(make_payload(edad=-1))
        assert exc_info.value.field == "edad"

    def test_age_too_large_for_float_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate(make_payload(edad=10 ** 400))
        assert exc_info.value.field == "edad"

    def test_unknown_sex_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate(make_payload(sexo="Otro"))
        assert exc_info.value.field == "sexo"

    def test_name_is_trimmed(self):
        result = self.service.validate(make_payload(nombre="  Luis  "))
        assert result.name == "Luis"


class TestDriverPersistence:

    def setup_method(self):
        self.service = DriverService()

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, store):
        driver = await self.service.create_driver(store, make_payload())

        assert driver.id is not None
        assert driver.created_at is not None
        assert driver.updated_at == driver.created_at
        assert driver.sex == "Masculino"

    @pytest.mark.asyncio
    async def test_created_driver_is_listed_first(self, store):
        first = await self.service.create_driver(store, make_payload(nombre="Primero"))
        second = await self.service.create_driver(store, make_payload(nombre="Segundo"))

        drivers = await self.service.list_drivers(store)

        assert [d.id for d in drivers] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_list_empty(self, store):
        assert await self.service.list_drivers(store) == []

    @pytest.mark.asyncio
    async def test_store_failure_wrapped(self, mock_store, mock_db_session):
        mock_db_session.flush.side_effect = OperationalError(
            "INSERT INTO drivers", {}, Exception("connection refused")
        )

        with pytest.raises(StoreError) as exc_info:
            await self.service.create_driver(mock_store, make_payload())

        assert "connection refused" in exc_info.value.message
