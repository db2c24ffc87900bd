"""Aggregate model imports for Alembic auto-detection."""

# Users and tenancy
from app.models.public.user import User  # noqa: F401
from app.models.public.property import MembershipRole, Property, PropertyMembership  # noqa: F401

# Property-scoped
from app.models.tenant.property_settings import PropertySettings  # noqa: F401
from app.models.tenant.food_temperature_log import (  # noqa: F401
    BlastEvent,
    FoodTempStatus,
    FoodTemperatureLog,
    LogPeriod,
)
from app.models.tenant.refrigeration import (  # noqa: F401
    RefrigerationUnit,
    TemperatureLog,
    UnitReadingStatus,
    UnitType,
)
