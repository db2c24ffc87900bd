"""Blast-chill ledger queries.

Loads a window of blast-chill rows for one property, runs them through
`reconcile()`, and projects the result:

    list_open_batches    batches still in the chiller (last N days)
    list_today_batches   batches whose END falls in the current UTC day
    list_batches         every batch in an arbitrary window (EHO view)
    find_open_start      the open batch an incoming END should close

N is `settings.blast_chill_lookback_days` (90 by default).
"""

from datetime import datetime, timedelta

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.middleware.exceptions import BusinessLogicError
from app.models.public.user import User
from app.models.tenant.food_temperature_log import FoodTemperatureLog
from app.services.blast_chill import (
    BLAST_TAG_PREFIX,
    ChillBatch,
    ChillEvent,
    reconcile,
)
from app.utils.dates import to_naive_utc, utc_day_bounds, utc_now


def _lookback(now: datetime) -> datetime:
    return now - timedelta(days=settings.blast_chill_lookback_days)


def resolve_batch_window(
    start: datetime | None,
    end: datetime | None,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Listing window; defaults to the lookback period up to tomorrow 00:00 UTC."""
    now = now or utc_now()
    start = to_naive_utc(start) or _lookback(now)
    end = to_naive_utc(end) or utc_day_bounds(now)[1]
    if start >= end:
        raise BusinessLogicError("Invalid from/to range.", error_code="INVALID_RANGE")
    return start, end


async def load_chill_events(
    db: AsyncSession,
    property_id: str,
    since: datetime,
    until: datetime | None = None,
) -> list[ChillEvent]:
    """Blast-chill rows for a property with `since <= logged_at < until`."""
    stmt = select(FoodTemperatureLog).where(
        FoodTemperatureLog.property_id == property_id,
        FoodTemperatureLog.logged_at >= since,
        or_(
            FoodTemperatureLog.blast_event.is_not(None),
            FoodTemperatureLog.notes.contains(BLAST_TAG_PREFIX, autoescape=True),
        ),
    )
    if until is not None:
        stmt = stmt.where(FoodTemperatureLog.logged_at < until)

    result = await db.execute(stmt.order_by(FoodTemperatureLog.logged_at.asc()))
    events = (ChillEvent.from_log(row) for row in result.scalars().all())
    return [e for e in events if e is not None]


async def list_batches(
    db: AsyncSession,
    property_id: str,
    since: datetime,
    until: datetime,
) -> list[ChillBatch]:
    return reconcile(await load_chill_events(db, property_id, since, until))


async def list_open_batches(
    db: AsyncSession,
    property_id: str,
    now: datetime | None = None,
) -> list[ChillBatch]:
    now = now or utc_now()
    events = await load_chill_events(db, property_id, _lookback(now))
    return [b for b in reconcile(events) if b.is_open]


async def list_today_batches(
    db: AsyncSession,
    property_id: str,
    now: datetime | None = None,
) -> list[ChillBatch]:
    """Batches completed today (UTC), newest first.

    STARTs logged before today are still loaded so overnight batches
    pair up; ENDs with no START are included.
    """
    day_start, day_end = utc_day_bounds(now or utc_now())
    events = await load_chill_events(db, property_id, _lookback(day_start), day_end)
    return [
        b for b in reconcile(events)
        if b.end_at is not None and day_start <= b.end_at < day_end
    ]


async def find_open_start(
    db: AsyncSession,
    property_id: str,
    *,
    batch_id: str | None = None,
    food_name: str | None = None,
    now: datetime | None = None,
) -> ChillBatch | None:
    """The open batch an END with this batch id / food name would close.

    The whole window is reconciled first, so a START already consumed
    by any END (whatever its food name or key) is never offered again.
    Lookup follows `reconcile()`: by batch id, falling back to a legacy
    (id-less) START of the same food; without an id, a legacy START of
    that name first, else the newest open START of that name.
    """
    open_batches = await list_open_batches(db, property_id, now)

    if batch_id:
        matches = [b for b in open_batches if b.batch_id == batch_id]
        if not matches and food_name:
            matches = [b for b in open_batches if b.legacy and b.food_name == food_name]
    else:
        named = [b for b in open_batches if b.food_name == food_name]
        matches = [b for b in named if b.legacy] or named
    return matches[0] if matches else None


async def resolve_user_labels(db: AsyncSession, user_ids) -> dict[str, str]:
    """Map user id → display label (name, else email)."""
    ids = sorted({u for u in user_ids if u})
    if not ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(ids)))
    return {u.id: u.display_name for u in result.scalars().all()}
