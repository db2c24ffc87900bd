"""Property settings router.

Endpoints:
    GET /api/property-settings    Current thresholds (any member)
    PUT /api/property-settings    Update thresholds (property admins)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import get_current_member, require_property_admin
from app.database import get_db
from app.models.public.property import PropertyMembership
from app.schemas.property_settings import PropertySettingsOut, PropertySettingsUpdate
from app.services.property_settings import get_property_settings, update_property_settings

router = APIRouter()


@router.get("", response_model=PropertySettingsOut)
async def read_settings(
    db: AsyncSession = Depends(get_db),
    member: PropertyMembership = Depends(get_current_member),
):
    return await get_property_settings(db, member.property_id)


@router.put("", response_model=PropertySettingsOut)
async def write_settings(
    body: PropertySettingsUpdate,
    db: AsyncSession = Depends(get_db),
    admin: PropertyMembership = Depends(require_property_admin),
):
    return await update_property_settings(db, admin.property_id, body, user_id=admin.user_id)
