"""Refrigeration units (fridges / freezers) and their twice-daily readings.

Each unit is read at least in the AM and PM checks.  A reading taken
while the unit is defrosting has status DEFROST and no temperature.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean, DateTime, Float, ForeignKey, Index, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class UnitType(str, enum.Enum):
    FRIDGE = "FRIDGE"
    FREEZER = "FREEZER"


class UnitReadingStatus(str, enum.Enum):
    NORMAL = "NORMAL"
    DEFROST = "DEFROST"


class RefrigerationUnit(Base):
    __tablename__ = "refrigeration_units"
    __table_args__ = (
        UniqueConstraint("property_id", "name", name="uq_refrigeration_unit_property_name"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # FRIDGE | FREEZER
    type: Mapped[str] = mapped_column(String(10), default=UnitType.FRIDGE.value)
    # Retired units keep their history but are hidden from the logging screen
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    readings = relationship("TemperatureLog", back_populates="unit")


class TemperatureLog(Base):
    """One immutable unit reading."""
    __tablename__ = "temperature_logs"
    __table_args__ = (
        Index("ix_temperature_logs_property_logged_at", "property_id", "logged_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.id"), nullable=False, index=True
    )
    unit_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("refrigeration_units.id"), nullable=False, index=True
    )

    # logged_at is naive UTC
    logged_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    # AM | PM | OTHER
    period: Mapped[str] = mapped_column(String(10), nullable=False)
    # NORMAL | DEFROST
    status: Mapped[str] = mapped_column(String(10), default=UnitReadingStatus.NORMAL.value)
    # Null while defrosting
    value_c: Mapped[float | None] = mapped_column(Float)
    notes: Mapped[str | None] = mapped_column(Text)

    created_by_user_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id")
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    unit = relationship("RefrigerationUnit", back_populates="readings")
