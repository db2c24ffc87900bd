"""Per-property settings provider.

Every property always has a settings row: the first read creates one
with the defaults.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.tenant.property_settings import (
    DEFAULT_BLAST_CHILL_MAX_MINUTES,
    DEFAULT_BLAST_CHILL_TARGET_TENTH_C,
    PropertySettings,
)
from app.schemas.property_settings import PropertySettingsUpdate
from app.utils.dates import utc_now


async def get_property_settings(db: AsyncSession, property_id: str) -> PropertySettings:
    result = await db.execute(
        select(PropertySettings).where(PropertySettings.property_id == property_id)
    )
    row = result.scalar_one_or_none()
    if row is None:
        row = PropertySettings(
            property_id=property_id,
            blast_chill_target_tenth_c=DEFAULT_BLAST_CHILL_TARGET_TENTH_C,
            blast_chill_max_minutes=DEFAULT_BLAST_CHILL_MAX_MINUTES,
            updated_at=utc_now(),
        )
        db.add(row)
        await db.flush()
    return row


async def update_property_settings(
    db: AsyncSession,
    property_id: str,
    body: PropertySettingsUpdate,
    user_id: str,
) -> PropertySettings:
    """Apply a partial update.

    Changing thresholds never re-scores batches already closed: their
    verdict was stamped on the END row under the old rules.
    """
    row = await get_property_settings(db, property_id)
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(row, field, value)
    row.updated_by_user_id = user_id
    row.updated_at = utc_now()
    await db.flush()
    return row
