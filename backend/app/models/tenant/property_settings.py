"""PropertySettings: per-property compliance thresholds.

Temperatures are stored in tenths of a degree so comparisons are exact
integer checks (50 = 5.0 °C).
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

DEFAULT_BLAST_CHILL_TARGET_TENTH_C = 50
DEFAULT_BLAST_CHILL_MAX_MINUTES = 90


class PropertySettings(Base):
    __tablename__ = "property_settings"

    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.id"), primary_key=True
    )

    # ── Blast chill ──────────────────────────────────────────
    # END core temperature must be at or below this
    blast_chill_target_tenth_c: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_BLAST_CHILL_TARGET_TENTH_C, nullable=False
    )
    blast_chill_max_minutes: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_BLAST_CHILL_MAX_MINUTES, nullable=False
    )

    updated_by_user_id: Mapped[str | None] = mapped_column(String(36))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
