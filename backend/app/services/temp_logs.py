"""Food temperature log service.

Handles the immutable create path and the two read views:
  - create_temp_log()      standard readings and blast-chill START / END
  - list_today_logs()      today's readings + AM/PM compliance summary
  - list_logs_in_range()   print/export window, capped by retention

Blast-chill END writes are the only place a verdict is decided:
  1. Find the open START (by batch id, else by food name)
  2. Reject if none, or if the END is timed before the START
  3. Score against the property's thresholds in force right now
  4. Stamp status + append "(mins=N)" to notes for the audit trail
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.middleware.exceptions import BusinessLogicError, ConflictError
from app.models.tenant.food_temperature_log import (
    BlastEvent,
    FoodTempStatus,
    FoodTemperatureLog,
    LogPeriod,
)
from app.schemas.temp_log import TempLogCreate
from app.services.blast_chill import (
    ChillLimits,
    compute_verdict,
    elapsed_minutes,
    minutes_annotation,
    new_batch_id,
    parse_batch_id,
    parse_blast_event,
    strip_blast_tags,
)
from app.services.blast_ledger import find_open_start
from app.services.property_settings import get_property_settings
from app.utils.dates import months_ago, to_naive_utc, utc_day_bounds, utc_day_start, utc_now

logger = logging.getLogger(__name__)


async def create_temp_log(
    body: TempLogCreate,
    property_id: str,
    user_id: str,
    db: AsyncSession,
) -> FoodTemperatureLog:
    """Create one log row.  Nothing is written if a check fails.

    Raises:
        BusinessLogicError  missing temperature, no open START, END before START
        ConflictError       START for a batch id that is still open
    """
    logged_at = to_naive_utc(body.logged_at) or utc_now()
    event = body.blast_event or parse_blast_event(body.notes)
    batch_id = body.batch_id or parse_batch_id(body.notes)
    notes = strip_blast_tags(body.notes) if event else body.notes
    status = (body.status or FoodTempStatus.OK).value

    if event is not None and body.temp_c is None:
        label = "Start" if event == BlastEvent.START else "Finish"
        raise BusinessLogicError(
            f"{label} temp is required for blast chill {event.value}.",
            error_code="BLAST_TEMP_REQUIRED",
        )

    if event == BlastEvent.START:
        if batch_id:
            if await find_open_start(db, property_id, batch_id=batch_id, now=logged_at):
                logger.warning(f"Rejected blast chill START: batch {batch_id} is already open")
                raise ConflictError(
                    f"Blast chill batch {batch_id} is already open.",
                    error_code="BLAST_BATCH_OPEN",
                )
        else:
            batch_id = new_batch_id()

    elif event == BlastEvent.END:
        start = await find_open_start(
            db, property_id, batch_id=batch_id, food_name=body.food_name, now=logged_at,
        )
        if start is None:
            target = f"batch {batch_id}" if batch_id else f"'{body.food_name}'"
            logger.warning(f"Rejected blast chill END for {target}: no open START")
            raise BusinessLogicError(
                f"No open blast chill START found for {target}.",
                error_code="BLAST_START_NOT_FOUND",
            )
        if logged_at < start.start_at:
            logger.warning(
                f"Rejected blast chill END for batch {start.batch_id or start.food_name}: "
                f"logged before its START"
            )
            raise BusinessLogicError(
                "Finish time must be after start time.",
                error_code="BLAST_END_BEFORE_START",
            )

        minutes = elapsed_minutes(start.start_at, logged_at)
        limits = ChillLimits.from_settings(await get_property_settings(db, property_id))
        status = compute_verdict(body.temp_c, minutes, limits).value
        batch_id = batch_id or start.batch_id
        notes = minutes_annotation(notes, minutes)

    log = FoodTemperatureLog(
        property_id=property_id,
        logged_at=logged_at,
        log_date=utc_day_start(logged_at).date(),
        period=body.period.value if body.period else None,
        food_name=body.food_name,
        temp_c=body.temp_c,
        status=status,
        notes=notes,
        blast_event=event.value if event else None,
        batch_id=batch_id if event else None,
        created_by_user_id=user_id,
        created_at=utc_now(),
    )
    db.add(log)
    await db.flush()

    if event is not None:
        logger.info(
            f"Blast chill {event.value} logged for '{log.food_name}' "
            f"(batch {log.batch_id}, status {log.status})"
        )
    return log


# ── Read views ───────────────────────────────────────────────

async def list_today_logs(
    db: AsyncSession,
    property_id: str,
    now: datetime | None = None,
) -> tuple[datetime, list[FoodTemperatureLog]]:
    day_start, _ = utc_day_bounds(now or utc_now())
    result = await db.execute(
        select(FoodTemperatureLog)
        .where(
            FoodTemperatureLog.property_id == property_id,
            FoodTemperatureLog.log_date == day_start.date(),
        )
        .order_by(FoodTemperatureLog.logged_at.desc())
    )
    return day_start, list(result.scalars().all())


def compliance_summary(logs, minimum: int | None = None) -> dict:
    """Count AM / PM readings against the daily minimum."""
    minimum = settings.compliance_min_per_period if minimum is None else minimum
    am = sum(1 for log in logs if log.period == LogPeriod.AM.value)
    pm = sum(1 for log in logs if log.period == LogPeriod.PM.value)
    return {
        "am_count": am,
        "pm_count": pm,
        "am_min": minimum,
        "pm_min": minimum,
        "am_missing": max(0, minimum - am),
        "pm_missing": max(0, minimum - pm),
        "am_ok": am >= minimum,
        "pm_ok": pm >= minimum,
    }


def resolve_range(
    start: datetime | None,
    end: datetime | None,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Validate an export window; defaults to the whole retention period.

    The earliest allowed start is midnight UTC, N months back
    (`settings.temp_log_retention_months`); the default end is tomorrow
    00:00 UTC.
    """
    now = now or utc_now()
    earliest = utc_day_start(months_ago(now, settings.temp_log_retention_months))
    _, tomorrow = utc_day_bounds(now)

    start = to_naive_utc(start) or earliest
    end = to_naive_utc(end) or tomorrow
    if start >= end:
        raise BusinessLogicError("Invalid from/to range.", error_code="INVALID_RANGE")
    if start < earliest:
        raise BusinessLogicError(
            f"Range too old. Printing is limited to the last "
            f"{settings.temp_log_retention_months} months.",
            error_code="RANGE_TOO_OLD",
        )
    return start, end


async def list_logs_in_range(
    db: AsyncSession,
    property_id: str,
    start: datetime,
    end: datetime,
) -> list[FoodTemperatureLog]:
    result = await db.execute(
        select(FoodTemperatureLog)
        .where(
            FoodTemperatureLog.property_id == property_id,
            FoodTemperatureLog.logged_at >= start,
            FoodTemperatureLog.logged_at < end,
        )
        .order_by(
            FoodTemperatureLog.log_date.asc(),
            FoodTemperatureLog.period.asc(),
            FoodTemperatureLog.logged_at.asc(),
        )
    )
    return list(result.scalars().all())
