"""HaloCall models - re-exports all models and Base.metadata."""

from .base import Base, BigIntIDMixin, TimestampMixin, OrganizationMixin
from .organization import Organization, Merchant, User
from .location import Location
from .telephony import PhoneNumberConfig, AgentConfig, UserLocationAccess

__all__ = [
    "Base",
    "BigIntIDMixin",
    "TimestampMixin",
    "OrganizationMixin",
    "Organization",
    "Merchant",
    "User",
    "Location",
    "PhoneNumberConfig",
    "AgentConfig",
    "UserLocationAccess",
]
