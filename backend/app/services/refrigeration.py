"""Refrigeration unit service.

  - list_units() / create_unit()        the property's fridges and freezers
  - record_unit_reading()               one AM / PM / ad-hoc reading
  - list_today_latest_readings()        newest AM and PM reading per unit today
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.middleware.exceptions import BusinessLogicError
from app.models.tenant.food_temperature_log import LogPeriod
from app.models.tenant.refrigeration import RefrigerationUnit, TemperatureLog, UnitReadingStatus
from app.schemas.refrigeration import UnitCreate, UnitReadingCreate
from app.utils.dates import utc_day_bounds, utc_now

logger = logging.getLogger(__name__)


async def list_units(db: AsyncSession, property_id: str) -> list[RefrigerationUnit]:
    result = await db.execute(
        select(RefrigerationUnit)
        .where(
            RefrigerationUnit.property_id == property_id,
            RefrigerationUnit.is_active == True,  # noqa: E712
        )
        .order_by(RefrigerationUnit.name.asc())
    )
    return list(result.scalars().all())


async def create_unit(db: AsyncSession, property_id: str, body: UnitCreate) -> RefrigerationUnit:
    """Add a unit.  A duplicate name surfaces as UNIT_NAME_TAKEN (409)."""
    unit = RefrigerationUnit(
        property_id=property_id,
        name=body.name,
        type=body.type.value,
        is_active=True,
        created_at=utc_now(),
    )
    db.add(unit)
    await db.flush()
    logger.info(f"Refrigeration unit '{unit.name}' ({unit.type}) added to property {property_id}")
    return unit


async def record_unit_reading(
    body: UnitReadingCreate,
    property_id: str,
    user_id: str,
    db: AsyncSession,
) -> TemperatureLog:
    defrost = body.status == UnitReadingStatus.DEFROST
    if not defrost and body.value_c is None:
        raise BusinessLogicError(
            "value_c is required for NORMAL readings.", error_code="UNIT_TEMP_REQUIRED",
        )

    result = await db.execute(
        select(RefrigerationUnit.id).where(
            RefrigerationUnit.id == body.unit_id,
            RefrigerationUnit.property_id == property_id,
            RefrigerationUnit.is_active == True,  # noqa: E712
        )
    )
    if result.scalar_one_or_none() is None:
        raise BusinessLogicError("Invalid refrigeration unit.", error_code="INVALID_UNIT")

    now = utc_now()
    log = TemperatureLog(
        property_id=property_id,
        unit_id=body.unit_id,
        logged_at=now,
        period=body.period.value,
        status=body.status.value,
        value_c=None if defrost else body.value_c,
        notes=body.notes,
        created_by_user_id=user_id,
        created_at=now,
    )
    db.add(log)
    await db.flush()
    return log


async def list_today_latest_readings(
    db: AsyncSession,
    property_id: str,
    now: datetime | None = None,
) -> tuple[datetime, list[TemperatureLog]]:
    """Newest reading per (unit, AM/PM) logged today (UTC).  OTHER is skipped."""
    day_start, day_end = utc_day_bounds(now or utc_now())
    result = await db.execute(
        select(TemperatureLog)
        .options(selectinload(TemperatureLog.unit))
        .where(
            TemperatureLog.property_id == property_id,
            TemperatureLog.logged_at >= day_start,
            TemperatureLog.logged_at < day_end,
            TemperatureLog.period.in_([LogPeriod.AM.value, LogPeriod.PM.value]),
        )
        .order_by(TemperatureLog.logged_at.desc(), TemperatureLog.id.desc())
    )

    latest: dict[tuple[str, str], TemperatureLog] = {}
    for log in result.scalars().all():
        latest.setdefault((log.unit_id, log.period), log)
    return day_start, list(latest.values())
