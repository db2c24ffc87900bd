"""Pydantic schemas for refrigeration units and unit readings."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from app.models.tenant.food_temperature_log import LogPeriod
from app.models.tenant.refrigeration import UnitReadingStatus, UnitType


# ── Units ────────────────────────────────────────────────────

class UnitCreate(BaseModel):
    name: str = Field(..., max_length=100)
    type: UnitType = UnitType.FRIDGE

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class UnitOut(BaseModel):
    id: str
    name: str
    type: str
    is_active: bool

    model_config = {"from_attributes": True}


class UnitsResponse(BaseModel):
    units: list[UnitOut]


class UnitCreated(BaseModel):
    unit: UnitOut


# ── Readings ─────────────────────────────────────────────────

class UnitReadingCreate(BaseModel):
    """Payload for POST /api/refrigeration/readings.

    ``value_c`` may be omitted only for a DEFROST reading, and is
    discarded if sent with one.
    """
    unit_id: str
    period: LogPeriod = LogPeriod.OTHER
    status: UnitReadingStatus = UnitReadingStatus.NORMAL
    value_c: float | None = Field(None, allow_inf_nan=False)
    notes: str | None = None

    model_config = {"extra": "forbid"}

    @field_validator("notes")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class UnitReadingOut(BaseModel):
    id: str
    unit_id: str
    logged_at: datetime
    period: str
    status: str
    value_c: float | None
    notes: str | None
    created_by_user_id: str | None

    model_config = {"from_attributes": True}


class UnitReadingCreated(BaseModel):
    log: UnitReadingOut


class LatestUnitReading(UnitReadingOut):
    unit_name: str
    logged_by: str


class TodayUnitReadingsResponse(BaseModel):
    """Latest AM and PM reading per unit for the current UTC day."""
    log_date: date
    latest: list[LatestUnitReading]
