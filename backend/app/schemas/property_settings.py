"""Pydantic schemas for per-property compliance settings."""

from datetime import datetime

from pydantic import BaseModel, Field


class PropertySettingsOut(BaseModel):
    property_id: str
    blast_chill_target_tenth_c: int
    blast_chill_max_minutes: int
    updated_by_user_id: str | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class PropertySettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""
    # -10.0 °C .. 20.0 °C
    blast_chill_target_tenth_c: int | None = Field(None, ge=-100, le=200)
    # up to one day
    blast_chill_max_minutes: int | None = Field(None, ge=1, le=1440)
