"""Models shared across all properties (users, properties, memberships)."""

from app.models.public.property import MembershipRole, Property, PropertyMembership
from app.models.public.user import User

__all__ = ["MembershipRole", "Property", "PropertyMembership", "User"]
