"""FastAPI dependencies for the session and property membership.

Dependencies:
  get_current_user         → decode JWT, load user from DB, return User
  get_current_member       → active membership of the user in the token's property
  require_property_admin   → same, restricted to PROPERTY_ADMIN
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt import decode_token
from app.database import get_db
from app.middleware.exceptions import PermissionDeniedError, TenantContextError
from app.models.public.property import MembershipRole, PropertyMembership
from app.models.public.user import User

bearer_scheme = HTTPBearer(auto_error=False)


# ── Core user dependency ────────────────────────────────────

async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Decode the JWT, load the user, and return it.

    Stashes the decoded payload on the user object as `_token_payload`
    so downstream deps can read the property claim without re-decoding.
    """
    payload = decode_token(credentials.credentials) if credentials else {}
    user_id: str | None = payload.get("sub")
    if not user_id or payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not logged in",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    user._token_payload = payload  # type: ignore[attr-defined]
    return user


# ── Property membership ─────────────────────────────────────

async def get_current_member(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PropertyMembership:
    """Return the user's active membership in the session's property.

    Routes read `member.property_id` to scope every query and
    `member.user_id` for accountability on writes.
    """
    payload: dict = getattr(user, "_token_payload", {})
    property_id = payload.get("property_id")
    if not property_id:
        raise TenantContextError()

    result = await db.execute(
        select(PropertyMembership).where(
            PropertyMembership.property_id == property_id,
            PropertyMembership.user_id == user.id,
            PropertyMembership.is_active == True,  # noqa: E712
        )
    )
    membership = result.scalar_one_or_none()
    if not membership:
        raise PermissionDeniedError("Not a member of this property.")
    return membership


async def require_property_admin(
    member: PropertyMembership = Depends(get_current_member),
) -> PropertyMembership:
    if member.role != MembershipRole.PROPERTY_ADMIN:
        raise PermissionDeniedError("Property admin access required")
    return member
