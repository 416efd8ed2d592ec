"""
Driver Telemetry API: Driver SQLAlchemy Model
================================================

What:  ORM model for the `drivers` table.
Who:   Used by DriverService (create, list) and PurgeService.

Table Design:
    - UUID primary key assigned on insert
    - sex stored as its display value ("Masculino" / "Femenino")
    - created_at indexed DESC for the "most recent first" listing
    - rows are never updated; updated_at mirrors created_at
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from driver_telemetry.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Sex(str, enum.Enum):
    MALE = "Masculino"
    FEMALE = "Femenino"


class Driver(Base):
    """
    A registered driver.

    Lifecycle:
        Created via POST /conductor, never updated, removed only by the
        bulk purge (DELETE /conductor/all).
    """

    __tablename__ = "drivers"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    age: Mapped[float] = mapped_column(Float, nullable=False)

    sex: Mapped[str] = mapped_column(String(20), nullable=False)

    shift: Mapped[str] = mapped_column(String(100), nullable=False)

    # Free-text health note
    condition: Mapped[str] = mapped_column(Text, nullable=False)

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

    __table_args__ = (
        Index("idx_drivers_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Driver(id={self.id}, name='{self.name}', created_at='{self.created_at}')>"
