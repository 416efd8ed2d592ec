"""
Driver Telemetry API: Driver Service
=======================================

What:  Driver registration and listing.
Who:   Called by the /conductor route handlers.

Validation:
    Every field is required. Strings must be non-empty after trimming,
    `age` must be a number >= 0 (0 is valid), `sex` must be one of the
    `Sex` values. All failures raise ValidationError (HTTP 400).
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from driver_telemetry.database import Store
from driver_telemetry.exceptions import StoreError, ValidationError
from driver_telemetry.models.driver import Driver, Sex, utcnow
from driver_telemetry.schemas.common import is_number
from driver_telemetry.schemas.driver import DriverCreate

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Todos los campos son requeridos"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class DriverService:
    """
    Business logic for driver records.

    Stateless: the store is passed to every call.
    """

    def validate(self, payload: DriverCreate) -> DriverCreate:
        """
        Check a registration payload and return a normalized copy.

        Raises:
            ValidationError: a field is missing/empty, `age` is not a
                non-negative number, or `sex` is not a known value
        """
        name = _clean(payload.name)
        sex = _clean(payload.sex)
        shift = _clean(payload.shift)
        condition = _clean(payload.condition)

        if None in (name, sex, shift, condition) or payload.age is None:
            raise ValidationError(message=MISSING_FIELDS_MESSAGE)

        if not is_number(payload.age):
            raise ValidationError(message="edad debe ser un número", field="edad")
        if payload.age < 0:
            raise ValidationError(message="edad no puede ser negativa", field="edad")

        allowed = [s.value for s in Sex]
        if sex not in allowed:
            raise ValidationError(
                message=f"sexo debe ser uno de: {', '.join(allowed)}",
                field="sexo",
                context={"allowed": allowed},
            )

        return DriverCreate(
            name=name, age=payload.age, sex=sex, shift=shift, condition=condition
        )

    async def create_driver(self, store: Store, payload: DriverCreate) -> Driver:
        """
        Register a new driver.

        Returns:
            The stored Driver with its generated id and timestamps.

        Raises:
            ValidationError: invalid payload (→ 400)
            StoreError: insert failed (→ 500)
        """
        data = self.validate(payload)
        now = utcnow()
        driver = Driver(
            name=data.name,
            age=float(data.age),
            sex=data.sex,
            shift=data.shift,
            condition=data.condition,
            created_at=now,
            updated_at=now,
        )

        try:
            async with store.session() as session:
                session.add(driver)
                await session.flush()
        except SQLAlchemyError as e:
            logger.error("Store error creating driver: %s", str(e))
            raise StoreError(message=str(e), context={"operation": "create_driver"})

        logger.info("Driver registered: %s", driver.id)
        return driver

    async def list_drivers(self, store: Store) -> List[Driver]:
        """All drivers, most recently created first."""
        try:
            async with store.session() as session:
                result = await session.execute(
                    select(Driver).order_by(Driver.created_at.desc())
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Store error listing drivers: %s", str(e))
            raise StoreError(message=str(e), context={"operation": "list_drivers"})


driver_service = DriverService()
