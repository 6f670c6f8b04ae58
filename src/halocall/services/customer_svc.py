"""Read-side queries: customers, their locations and users."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import AgentConfig, Location, Merchant, Organization, PhoneNumberConfig, User

RECENT_CUSTOMER_LIMIT = 20


@dataclass
class CustomerSummary:
    clerk_organization_id: str
    clerk_organization_name: str
    merchant_id: str
    is_sandbox: bool
    created_at: datetime
    is_configured: bool

    @property
    def environment(self) -> str:
        return "Sandbox" if self.is_sandbox else "Production"


@dataclass
class LocationSummary:
    id: int
    merchant_location_id: str
    timezone: str
    address: dict[str, Any] | None
    has_phone_config: bool


async def list_recent_active_customers(
    db: AsyncSession, limit: int = RECENT_CUSTOMER_LIMIT
) -> list[CustomerSummary]:
    """Organizations with an active merchant, newest connection first.

    ``is_configured`` is true when any of the organization's locations has a
    phone number config that itself has an agent config.
    """
    configured = (
        select(Location.id)
        .join(PhoneNumberConfig, PhoneNumberConfig.location_id == Location.id)
        .join(AgentConfig, AgentConfig.phone_number_id == PhoneNumberConfig.id)
        .where(Location.clerk_organization_id == Organization.clerk_organization_id)
        .exists()
    )
    stmt = (
        select(
            Organization.clerk_organization_id,
            Organization.clerk_organization_name,
            Merchant.merchant_id,
            Merchant.is_sandbox,
            Merchant.created_at,
            configured.label("is_configured"),
        )
        .select_from(Merchant)
        .join(Organization, Organization.clerk_organization_id == Merchant.clerk_organization_id)
        .where(Merchant.is_active.is_(True))
        .order_by(Merchant.created_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return [
        CustomerSummary(
            clerk_organization_id=row.clerk_organization_id,
            clerk_organization_name=row.clerk_organization_name,
            merchant_id=row.merchant_id,
            is_sandbox=bool(row.is_sandbox),
            created_at=row.created_at,
            is_configured=bool(row.is_configured),
        )
        for row in result
    ]


async def list_locations(db: AsyncSession, organization_id: str) -> list[LocationSummary]:
    """Locations of an organization ordered by id.

    ``has_phone_config`` only requires a phone number config, with or
    without an agent attached.
    """
    has_phone = (
        select(PhoneNumberConfig.id)
        .where(PhoneNumberConfig.location_id == Location.id)
        .exists()
    )
    stmt = (
        select(
            Location.id,
            Location.merchant_location_id,
            Location.timezone,
            Location.address,
            has_phone.label("has_phone_config"),
        )
        .where(Location.clerk_organization_id == organization_id)
        .order_by(Location.id)
    )
    result = await db.execute(stmt)
    return [
        LocationSummary(
            id=row.id,
            merchant_location_id=row.merchant_location_id,
            timezone=row.timezone,
            address=row.address,
            has_phone_config=bool(row.has_phone_config),
        )
        for row in result
    ]


async def find_user(db: AsyncSession, user_id: str, organization_id: str) -> User | None:
    stmt = select(User).where(
        User.clerk_user_id == user_id,
        User.clerk_organization_id == organization_id,
    )
    result = await db.execute(stmt)
    return result.scalars().first()
