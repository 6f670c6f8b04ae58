"""Write-side operations: phone numbers, agents and location access."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import HaloCallError, PhoneNumberInUseError, ProvisioningError
from ..models import AgentConfig, PhoneNumberConfig, UserLocationAccess

logger = logging.getLogger(__name__)


async def phone_number_exists(db: AsyncSession, phone_number: str) -> bool:
    """Advisory check; the unique constraint is the real guard."""
    stmt = select(PhoneNumberConfig.id).where(PhoneNumberConfig.phone_number == phone_number)
    result = await db.execute(stmt)
    return result.first() is not None


async def create_phone_number_config(
    db: AsyncSession, phone_number: str, location_id: int, *, commit: bool = True
) -> PhoneNumberConfig:
    config = PhoneNumberConfig(phone_number=phone_number, location_id=location_id)
    db.add(config)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        if await phone_number_exists(db, phone_number):
            logger.warning("Phone number %s lost the uniqueness race", phone_number)
            raise PhoneNumberInUseError(phone_number) from exc
        raise ProvisioningError(f"Could not create phone_number_config: {exc.orig}") from exc
    if commit:
        await db.commit()
    logger.info("Created phone_number_config id=%s for location %s", config.id, location_id)
    return config


async def create_agent_config(
    db: AsyncSession, agent_id: str, phone_number_config_id: int, *, commit: bool = True
) -> AgentConfig:
    config = AgentConfig(agent_id=agent_id, phone_number_id=phone_number_config_id)
    db.add(config)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        raise ProvisioningError(f"Could not create agent_config: {exc.orig}") from exc
    if commit:
        await db.commit()
    logger.info("Created agent_config %s for phone_number_id=%s", agent_id, phone_number_config_id)
    return config


async def provision_phone_agent(
    db: AsyncSession, phone_number: str, location_id: int, agent_id: str
) -> tuple[PhoneNumberConfig, AgentConfig]:
    """Create the phone number config and its agent config in one transaction.

    Either both rows are committed or neither is.
    """
    try:
        phone = await create_phone_number_config(db, phone_number, location_id, commit=False)
        agent = await create_agent_config(db, agent_id, phone.id, commit=False)
        await db.commit()
    except HaloCallError:
        await db.rollback()
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        raise ProvisioningError(f"Could not create configuration: {exc}") from exc
    return phone, agent


async def create_user_location_access(
    db: AsyncSession, organization_id: str, user_id: str, location_id: int
) -> tuple[UserLocationAccess, bool]:
    """Grant a user access to a location. Returns (grant, created)."""
    stmt = select(UserLocationAccess).where(
        UserLocationAccess.clerk_organization_id == organization_id,
        UserLocationAccess.clerk_user_id == user_id,
        UserLocationAccess.location_id == location_id,
    )
    result = await db.execute(stmt)
    grant = result.scalar_one_or_none()
    if grant:
        return grant, False

    grant = UserLocationAccess(
        clerk_organization_id=organization_id,
        clerk_user_id=user_id,
        location_id=location_id,
    )
    db.add(grant)
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise ProvisioningError(f"Could not grant location access: {exc}") from exc
    await db.refresh(grant)
    logger.info("Granted user %s access to location %s", user_id, location_id)
    return grant, True
