"""
Driver Telemetry API: Reading Service
========================================

What:  Ingestion, listing and latest-value lookup for the three reading
       kinds, plus the combined latest-reading query.
How:   One `ReadingService` class parameterized by a `ReadingKind`
       descriptor. The descriptor names the ORM model, the value columns and
       the per-kind messages; nothing else differs between kinds.

Kinds:
    ┌────────────┬──────────────────┬────────────────────────┐
    │ kind       │ model            │ value columns          │
    ├────────────┼──────────────────┼────────────────────────┤
    │ heart_rate │ HeartRateReading │ bpm (>= 0)             │
    │ compass    │ CompassReading   │ heading                │
    │ location   │ LocationReading  │ latitude, longitude    │
    └────────────┴──────────────────┴────────────────────────┘

Presence checks use `is None`: a reading of exactly 0 is valid.

Combined query:
    latest_combined() starts the three latest lookups together with
    asyncio.gather, each in its own session, and waits for all of them.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from driver_telemetry.database import Store
from driver_telemetry.exceptions import NotFoundError, StoreError, ValidationError
from driver_telemetry.models.driver import utcnow
from driver_telemetry.models.reading import (
    CompassReading,
    HeartRateReading,
    LocationReading,
    ReadingMixin,
)
from driver_telemetry.schemas.common import is_number
from driver_telemetry.schemas.reading import (
    CombinedLatestResponse,
    CompassSnapshot,
    HeartRateSnapshot,
    LocationSnapshot,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadingKind:
    """
    Describes one reading kind.

    Attributes:
        name:             Internal identifier used in logs
        model:            ORM model class
        value_fields:     Model columns holding the measurement
        required_message: 400 message for a missing/invalid field
        saved_message:    `message` of the 201 response
        empty_message:    404 message when a driver has no readings
        non_negative:     Value columns that must be >= 0
    """
    name: str
    model: Type[ReadingMixin]
    value_fields: Tuple[str, ...]
    required_message: str
    saved_message: str
    empty_message: str
    non_negative: Tuple[str, ...] = field(default_factory=tuple)


HEART_RATE = ReadingKind(
    name="heart_rate",
    model=HeartRateReading,
    value_fields=("bpm",),
    required_message="conductorId y bpm son requeridos",
    saved_message="Ritmo guardado",
    empty_message="Sin lecturas de ritmo",
    non_negative=("bpm",),
)

COMPASS = ReadingKind(
    name="compass",
    model=CompassReading,
    value_fields=("heading",),
    required_message="conductorId y compass son requeridos",
    saved_message="Brújula guardada",
    empty_message="Sin lecturas de brújula",
)

LOCATION = ReadingKind(
    name="location",
    model=LocationReading,
    value_fields=("latitude", "longitude"),
    required_message="conductorId, latitud y longitud son requeridos",
    saved_message="Ubicación guardada",
    empty_message="Sin lecturas de ubicación",
)


class ReadingService:
    """
    Append-only reading operations for a single kind.

    Stateless apart from its kind: the store is passed to every call.
    """

    def __init__(self, kind: ReadingKind):
        self.kind = kind

    def validate(self, driver_id: Optional[str], values: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: driver_id missing/empty, a value column absent,
                not a number, or negative where the kind forbids it
        """
        if not driver_id:
            raise ValidationError(message=self.kind.required_message, field="conductorId")

        for name in self.kind.value_fields:
            value = values.get(name)
            if value is None or not is_number(value):
                raise ValidationError(message=self.kind.required_message, field=name)
            if name in self.kind.non_negative and value < 0:
                raise ValidationError(message=f"{name} no puede ser negativo", field=name)

    async def record(
        self, store: Store, driver_id: Optional[str], values: Dict[str, Any]
    ) -> ReadingMixin:
        """
        Persist one reading with server-assigned timestamps.

        driver_id is stored as sent; it is not checked against registered
        drivers.

        Raises:
            ValidationError: invalid input (→ 400)
            StoreError: insert failed (→ 500)
        """
        self.validate(driver_id, values)

        now = utcnow()
        reading = self.kind.model(
            driver_id=driver_id,
            recorded_at=now,
            created_at=now,
            updated_at=now,
            **{name: float(values[name]) for name in self.kind.value_fields},
        )

        try:
            async with store.session() as session:
                session.add(reading)
                await session.flush()
        except SQLAlchemyError as e:
            logger.error("Store error recording %s reading: %s", self.kind.name, str(e))
            raise StoreError(message=str(e), context={"kind": self.kind.name})

        logger.debug("Recorded %s reading %s for driver %s", self.kind.name, reading.id, driver_id)
        return reading

    async def list_all(self, store: Store) -> List[ReadingMixin]:
        """Every reading of this kind, most recent first."""
        model = self.kind.model
        try:
            async with store.session() as session:
                result = await session.execute(
                    select(model).order_by(model.created_at.desc())
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Store error listing %s readings: %s", self.kind.name, str(e))
            raise StoreError(message=str(e), context={"kind": self.kind.name})

    async def find_latest(self, store: Store, driver_id: str) -> Optional[ReadingMixin]:
        """Most recent reading for the driver, or None."""
        model = self.kind.model
        try:
            async with store.session() as session:
                result = await session.execute(
                    select(model)
                    .where(model.driver_id == driver_id)
                    .order_by(model.created_at.desc())
                    .limit(1)
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Store error fetching latest %s reading: %s", self.kind.name, str(e))
            raise StoreError(
                message=str(e),
                context={"kind": self.kind.name, "driver_id": driver_id},
            )

    async def latest(self, store: Store, driver_id: str) -> ReadingMixin:
        """
        Most recent reading for the driver.

        Raises:
            NotFoundError: the driver has no reading of this kind (→ 404)
        """
        reading = await self.find_latest(store, driver_id)
        if reading is None:
            raise NotFoundError(message=self.kind.empty_message, resource=self.kind.name)
        return reading


heart_rate_service = ReadingService(HEART_RATE)
compass_service = ReadingService(COMPASS)
location_service = ReadingService(LOCATION)


async def latest_combined(store: Store, driver_id: str) -> CombinedLatestResponse:
    """
    Latest reading of every kind for one driver.

    All three lookups are issued before any is awaited. Once every lookup
    has finished, the first failure (if any) is re-raised.

    Raises:
        NotFoundError: the driver has no readings of any kind (→ 404)
        StoreError: a lookup failed (→ 500)
    """
    results = await asyncio.gather(
        heart_rate_service.find_latest(store, driver_id),
        compass_service.find_latest(store, driver_id),
        location_service.find_latest(store, driver_id),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result

    heart_rate, compass, location = results
    if heart_rate is None and compass is None and location is None:
        raise NotFoundError(message="No hay lecturas para este conductor", resource="reading")

    return CombinedLatestResponse(
        driver_id=driver_id,
        heart_rate=HeartRateSnapshot.model_validate(heart_rate) if heart_rate is not None else None,
        compass=CompassSnapshot.model_validate(compass) if compass is not None else None,
        location=LocationSnapshot.model_validate(location) if location is not None else None,
    )
