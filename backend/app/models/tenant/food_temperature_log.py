"""FoodTemperatureLog: one immutable food temperature reading.

Rows are create-only: corrections are made by logging a new reading,
never by editing an old one, so the table doubles as the audit trail
an EHO inspects.

Blast chilling is recorded as two rows sharing a `batch_id`:
    START  (food goes into the chiller, core temp logged)
    END    (food comes out, core temp logged, verdict stamped in `status`)

Older rows carry the same information as tags inside `notes`
(`[BLAST_CHILL_START]`, `[BLAST_CHILL_END]`, `[BC:<id>]`) with the
`blast_event` / `batch_id` columns left empty; readers fall back to
parsing those tags (see app.services.blast_chill).
"""

import enum
import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class LogPeriod(str, enum.Enum):
    AM = "AM"
    PM = "PM"
    OTHER = "OTHER"


class FoodTempStatus(str, enum.Enum):
    OK = "OK"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    DISCARDED = "DISCARDED"
    REHEATED = "REHEATED"
    COOLED = "COOLED"


class BlastEvent(str, enum.Enum):
    START = "START"
    END = "END"


class FoodTemperatureLog(Base):
    __tablename__ = "food_temperature_logs"
    __table_args__ = (
        Index("ix_food_temp_logs_property_logged_at", "property_id", "logged_at"),
        Index("ix_food_temp_logs_property_log_date", "property_id", "log_date"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.id"), nullable=False, index=True
    )

    # ── When ─────────────────────────────────────────────────
    # logged_at is naive UTC; log_date is its UTC calendar day
    logged_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    log_date: Mapped[date] = mapped_column(Date, nullable=False)
    period: Mapped[str | None] = mapped_column(String(10))

    # ── Reading ──────────────────────────────────────────────
    food_name: Mapped[str] = mapped_column(String(200), nullable=False)
    temp_c: Mapped[float | None] = mapped_column(Float)
    # OK | OUT_OF_RANGE | DISCARDED | REHEATED | COOLED
    status: Mapped[str] = mapped_column(String(20), default=FoodTempStatus.OK.value)
    notes: Mapped[str | None] = mapped_column(Text)

    # ── Blast chill ──────────────────────────────────────────
    # START | END | null (standard reading)
    blast_event: Mapped[str | None] = mapped_column(String(10), index=True)
    batch_id: Mapped[str | None] = mapped_column(String(64), index=True)

    # ── Metadata ─────────────────────────────────────────────
    created_by_user_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id")
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
