"""Refrigeration router: fridge / freezer units and their readings.

Endpoints:
    GET  /api/refrigeration/units             Active units, by name
    POST /api/refrigeration/units             Add a unit
    POST /api/refrigeration/readings          Record a unit reading
    GET  /api/refrigeration/readings/today    Latest AM / PM reading per unit today

Any member of the active property may use these.  Readings are
immutable, like food temperature logs.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.auth.deps import get_current_member
from app.models.public.property import PropertyMembership
from app.schemas.refrigeration import (
    LatestUnitReading,
    TodayUnitReadingsResponse,
    UnitCreate,
    UnitCreated,
    UnitOut,
    UnitReadingCreate,
    UnitReadingCreated,
    UnitReadingOut,
    UnitsResponse,
)
from app.services.blast_ledger import resolve_user_labels
from app.services.refrigeration import (
    create_unit,
    list_today_latest_readings,
    list_units,
    record_unit_reading,
)

router = APIRouter()


# ── Units ────────────────────────────────────────────────────

@router.get("/units", response_model=UnitsResponse)
async def get_units(
    db: AsyncSession = Depends(get_db),
    member: PropertyMembership = Depends(get_current_member),
):
    units = await list_units(db, member.property_id)
    return UnitsResponse(units=[UnitOut.model_validate(u) for u in units])


@router.post("/units", response_model=UnitCreated, status_code=status.HTTP_201_CREATED)
async def add_unit(
    body: UnitCreate,
    db: AsyncSession = Depends(get_db),
    member: PropertyMembership = Depends(get_current_member),
):
    unit = await create_unit(db, member.property_id, body)
    return UnitCreated(unit=UnitOut.model_validate(unit))


# ── Readings ─────────────────────────────────────────────────

@router.post("/readings", response_model=UnitReadingCreated, status_code=status.HTTP_201_CREATED)
async def add_reading(
    body: UnitReadingCreate,
    db: AsyncSession = Depends(get_db),
    member: PropertyMembership = Depends(get_current_member),
):
    log = await record_unit_reading(
        body, property_id=member.property_id, user_id=member.user_id, db=db,
    )
    return UnitReadingCreated(log=UnitReadingOut.model_validate(log))


@router.get("/readings/today", response_model=TodayUnitReadingsResponse)
async def today_readings(
    db: AsyncSession = Depends(get_db),
    member: PropertyMembership = Depends(get_current_member),
):
    day_start, logs = await list_today_latest_readings(db, member.property_id)
    labels = await resolve_user_labels(db, (log.created_by_user_id for log in logs))

    return TodayUnitReadingsResponse(
        log_date=day_start.date(),
        latest=[
            LatestUnitReading(
                **UnitReadingOut.model_validate(log).model_dump(),
                unit_name=log.unit.name,
                logged_by=labels.get(log.created_by_user_id, "Unknown user"),
            )
            for log in logs
        ],
    )
