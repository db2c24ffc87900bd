"""Property-scoped models.

Every row carries a `property_id`; queries must always filter on the
active property of the current session.
"""

from app.models.tenant.property_settings import PropertySettings
from app.models.tenant.food_temperature_log import (
    BlastEvent,
    FoodTempStatus,
    FoodTemperatureLog,
    LogPeriod,
)
from app.models.tenant.refrigeration import (
    RefrigerationUnit,
    TemperatureLog,
    UnitReadingStatus,
    UnitType,
)

__all__ = [
    "PropertySettings",
    "FoodTemperatureLog", "BlastEvent", "FoodTempStatus", "LogPeriod",
    "RefrigerationUnit", "TemperatureLog", "UnitReadingStatus", "UnitType",
]
