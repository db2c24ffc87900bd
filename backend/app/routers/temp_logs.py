"""Food temperature log router: immutable intake plus blast-chill views.

Endpoints:
    POST /api/temp-logs                  Create a log (standard or blast START/END)
    GET  /api/temp-logs/today            Today's logs + AM/PM compliance
    GET  /api/temp-logs/range            Logs in a window (print / EHO export)
    GET  /api/temp-logs/blast/open       Blast-chill batches still open
    GET  /api/temp-logs/blast/today      Blast-chill batches completed today
    GET  /api/temp-logs/blast/batches    All reconciled batches in a window

All endpoints are scoped to the active property of the session and
require an active membership.  There is no update or delete.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.auth.deps import get_current_member
from app.models.public.property import PropertyMembership
from app.schemas.blast_chill import (
    BatchListResponse,
    ChillBatchOut,
    OpenBatchesResponse,
    TodayBatchesResponse,
)
from app.schemas.temp_log import (
    ComplianceSummary,
    RangeLogsResponse,
    TempLogCreate,
    TempLogCreated,
    TempLogOut,
    TempLogWithUser,
    TodayLogsResponse,
)
from app.services.blast_ledger import (
    list_batches,
    list_open_batches,
    list_today_batches,
    resolve_batch_window,
    resolve_user_labels,
)
from app.services.temp_logs import (
    compliance_summary,
    create_temp_log,
    list_logs_in_range,
    list_today_logs,
    resolve_range,
)

router = APIRouter()


async def _batches_out(db: AsyncSession, batches) -> list[ChillBatchOut]:
    labels = await resolve_user_labels(db, (u for b in batches for u in b.user_ids))
    return [ChillBatchOut.from_batch(b, labels) for b in batches]


# ── Create ───────────────────────────────────────────────────

@router.post("", response_model=TempLogCreated, status_code=status.HTTP_201_CREATED)
async def create_log(
    body: TempLogCreate,
    db: AsyncSession = Depends(get_db),
    member: PropertyMembership = Depends(get_current_member),
):
    """Record a reading.  For a blast-chill END the status in the
    response is the verdict computed against the property thresholds."""
    log = await create_temp_log(
        body, property_id=member.property_id, user_id=member.user_id, db=db,
    )
    return TempLogCreated(log=TempLogOut.model_validate(log))


# ── Today ────────────────────────────────────────────────────

@router.get("/today", response_model=TodayLogsResponse)
async def today_logs(
    db: AsyncSession = Depends(get_db),
    member: PropertyMembership = Depends(get_current_member),
):
    day_start, logs = await list_today_logs(db, member.property_id)
    labels = await resolve_user_labels(db, (log.created_by_user_id for log in logs))

    return TodayLogsResponse(
        log_date=day_start.date(),
        logs=[
            TempLogWithUser(
                **TempLogOut.model_validate(log).model_dump(),
                logged_by=labels.get(log.created_by_user_id, "Unknown user"),
            )
            for log in logs
        ],
        compliance=ComplianceSummary(**compliance_summary(logs)),
    )


# ── Range ────────────────────────────────────────────────────

@router.get("/range", response_model=RangeLogsResponse)
async def range_logs(
    from_: datetime | None = Query(None, alias="from"),
    to: datetime | None = Query(None),
    db: AsyncSession = Depends(get_db),
    member: PropertyMembership = Depends(get_current_member),
):
    start, end = resolve_range(from_, to)
    logs = await list_logs_in_range(db, member.property_id, start, end)
    return RangeLogsResponse(
        from_=start,
        to=end,
        logs=[TempLogOut.model_validate(log) for log in logs],
    )


# ── Blast chill ──────────────────────────────────────────────

@router.get("/blast/open", response_model=OpenBatchesResponse)
async def open_batches(
    db: AsyncSession = Depends(get_db),
    member: PropertyMembership = Depends(get_current_member),
):
    """Batches with a START and no END yet, with who started them."""
    batches = await list_open_batches(db, member.property_id)
    return OpenBatchesResponse(open=await _batches_out(db, batches))


@router.get("/blast/today", response_model=TodayBatchesResponse)
async def today_batches(
    db: AsyncSession = Depends(get_db),
    member: PropertyMembership = Depends(get_current_member),
):
    """Batches finished today (UTC), newest first."""
    batches = await list_today_batches(db, member.property_id)
    return TodayBatchesResponse(today=await _batches_out(db, batches))


@router.get("/blast/batches", response_model=BatchListResponse)
async def all_batches(
    from_: datetime | None = Query(None, alias="from"),
    to: datetime | None = Query(None),
    db: AsyncSession = Depends(get_db),
    member: PropertyMembership = Depends(get_current_member),
):
    """Every reconciled batch in the window: closed, open, superseded,
    and ENDs with no START.  Defaults to the lookback period."""
    start, end = resolve_batch_window(from_, to)
    batches = await list_batches(db, member.property_id, start, end)
    return BatchListResponse(from_=start, to=end, batches=await _batches_out(db, batches))
