"""Pydantic schemas for reconciled blast-chill batches."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.services.blast_chill import ChillBatch


class ChillBatchOut(BaseModel):
    """One START/END pair (or a lone START / lone END).

    ``legacy`` marks batches paired by food name because no batch id
    was recorded; ``has_start`` is false for an END with no START.
    """
    key: str
    batch_id: str | None
    food_name: str
    status: str
    notes: str | None
    start_at: datetime | None
    start_temp_c: float | None
    start_by_user_id: str | None
    start_by: str | None = None
    end_at: datetime | None
    end_temp_c: float | None
    end_by_user_id: str | None
    end_by: str | None = None
    minutes: int | None
    legacy: bool
    has_start: bool

    model_config = {"from_attributes": True}

    @classmethod
    def from_batch(cls, batch: ChillBatch, labels: dict[str, str]) -> "ChillBatchOut":
        out = cls.model_validate(batch)
        out.start_by = labels.get(batch.start_by_user_id) if batch.start_by_user_id else None
        out.end_by = labels.get(batch.end_by_user_id) if batch.end_by_user_id else None
        return out


class OpenBatchesResponse(BaseModel):
    open: list[ChillBatchOut]


class TodayBatchesResponse(BaseModel):
    today: list[ChillBatchOut]


class BatchListResponse(BaseModel):
    from_: datetime = Field(..., alias="from")
    to: datetime
    batches: list[ChillBatchOut]

    model_config = {"populate_by_name": True}
