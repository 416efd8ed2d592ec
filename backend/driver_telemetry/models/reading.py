"""
Driver Telemetry API: Reading SQLAlchemy Models
==================================================

What:  ORM models for the three append-only reading tables.
How:   `ReadingMixin` declares the columns every reading carries
       (id, driver_id, recorded_at, created_at, updated_at); each concrete
       model adds its own value column(s).

Query Patterns:
    - Latest for a driver: WHERE driver_id = :id ORDER BY created_at DESC LIMIT 1
      → served by the (driver_id, created_at) index
    - Full history: ORDER BY created_at DESC
      → served by the created_at index

driver_id is a free-form string with no foreign key: readings for drivers
that were never registered are accepted.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from driver_telemetry.database import Base
from driver_telemetry.models.driver import utcnow


class ReadingMixin:
    """Columns shared by every reading kind."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    driver_id: Mapped[str] = mapped_column(String(255), nullable=False)

    # Measurement time; the server assigns it on insert
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    @declared_attr.directive
    def __table_args__(cls):
        return (
            Index(f"idx_{cls.__tablename__}_driver_created", "driver_id", "created_at"),
            Index(f"idx_{cls.__tablename__}_created_at", "created_at"),
        )

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__}(id={self.id}, driver_id='{self.driver_id}', "
            f"created_at='{self.created_at}')>"
        )


class HeartRateReading(ReadingMixin, Base):
    __tablename__ = "heart_rate_readings"

    bpm: Mapped[float] = mapped_column(Float, nullable=False)


class CompassReading(ReadingMixin, Base):
    __tablename__ = "compass_readings"

    # Degrees; no range check, negative or > 360 is stored as sent
    heading: Mapped[float] = mapped_column(Float, nullable=False)


class LocationReading(ReadingMixin, Base):
    __tablename__ = "location_readings"

    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
