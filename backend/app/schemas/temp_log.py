"""Pydantic schemas for food temperature logs."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.tenant.food_temperature_log import BlastEvent, FoodTempStatus, LogPeriod


# ── Create (the only write: logs are immutable) ──────────────

class TempLogCreate(BaseModel):
    """Payload for POST /api/temp-logs.

    Blast chilling is logged as two creates: ``blast_event="START"``
    when food goes in, ``blast_event="END"`` with the same ``batch_id``
    when it comes out.  A START without ``batch_id`` is given one.
    Notes in the older tagged format (``[BLAST_CHILL_END][BC:bc_x]``)
    are accepted too.

    ``status`` is ignored on END: the verdict is computed server-side.
    """
    food_name: str = Field(..., max_length=200)
    temp_c: float | None = Field(None, allow_inf_nan=False)
    logged_at: datetime | None = None
    notes: str | None = None
    period: LogPeriod | None = None
    status: FoodTempStatus | None = None
    blast_event: BlastEvent | None = None
    batch_id: str | None = Field(None, max_length=64)

    model_config = {"extra": "forbid"}

    @model_validator(mode="before")
    @classmethod
    def _reject_edits(cls, data):
        if isinstance(data, dict) and data.get("id"):
            raise ValueError("Temp logs are immutable and cannot be edited.")
        return data

    @field_validator("food_name")
    @classmethod
    def _food_name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("food_name is required.")
        return value

    @field_validator("notes", "batch_id")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


# ── Response ─────────────────────────────────────────────────

class TempLogOut(BaseModel):
    id: str
    property_id: str
    logged_at: datetime
    log_date: date
    period: str | None
    status: str
    food_name: str
    temp_c: float | None
    notes: str | None
    blast_event: str | None
    batch_id: str | None
    created_by_user_id: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class TempLogCreated(BaseModel):
    mode: str = "created"
    log: TempLogOut


class TempLogWithUser(TempLogOut):
    logged_by: str


class ComplianceSummary(BaseModel):
    """Minimum AM / PM reading counts for one day."""
    am_count: int
    pm_count: int
    am_min: int
    pm_min: int
    am_missing: int
    pm_missing: int
    am_ok: bool
    pm_ok: bool


class TodayLogsResponse(BaseModel):
    log_date: date
    logs: list[TempLogWithUser]
    compliance: ComplianceSummary


class RangeLogsResponse(BaseModel):
    from_: datetime = Field(..., alias="from")
    to: datetime
    logs: list[TempLogOut]

    model_config = {"populate_by_name": True}
