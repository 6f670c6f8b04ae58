"""Shared fixtures for the HaloCall test suite."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy import create_engine, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session

from halocall.models import (
    AgentConfig,
    Base,
    Location,
    Merchant,
    Organization,
    PhoneNumberConfig,
    User,
)

# Sample IDs used across tests
SAMPLE_ORG_ID = "org_acme123"
SAMPLE_ORG_NAME = "Acme Wellness Spa"
SAMPLE_MERCHANT_ID = "MLR8ZQ1A2B3C"
SAMPLE_MERCHANT_LOCATION_ID = "LH2J4K6M8N0P"
SAMPLE_USER_ID = "user_test789"
SAMPLE_AGENT_ID = "agent_abc123"
SAMPLE_PHONE = "+15559990000"

SAMPLE_ADDRESS = {
    "address_line_1": "1 Main St",
    "locality": "Springfield",
    "administrative_district_level_1": "IL",
    "postal_code": "62701",
}


def make_customer(
    org_id: str = SAMPLE_ORG_ID,
    name: str = SAMPLE_ORG_NAME,
    *,
    created_at: datetime | None = None,
    is_sandbox: bool = False,
    is_active: bool = True,
) -> tuple[Organization, Merchant]:
    org = Organization(clerk_organization_id=org_id, clerk_organization_name=name)
    merchant = Merchant(
        clerk_organization_id=org_id,
        merchant_id=f"M_{org_id}",
        is_sandbox=is_sandbox,
        is_active=is_active,
        created_at=created_at or datetime(2025, 1, 5, 15, 7, tzinfo=timezone.utc),
    )
    return org, merchant


def make_location(
    org_id: str = SAMPLE_ORG_ID,
    merchant_location_id: str = SAMPLE_MERCHANT_LOCATION_ID,
    address: dict | None = None,
) -> Location:
    return Location(
        clerk_organization_id=org_id,
        merchant_location_id=merchant_location_id,
        timezone="America/Chicago",
        address=SAMPLE_ADDRESS if address is None else address,
    )


# ============================================================================
# Async Store Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine):
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def location(db: AsyncSession) -> Location:
    """Acme Wellness Spa with one location and no phone configuration."""
    org, merchant = make_customer()
    loc = make_location()
    db.add_all([org, merchant, loc])
    await db.commit()
    await db.refresh(loc)
    return loc


# ============================================================================
# CLI Fixtures
# ============================================================================


class SyncStore:
    """File-backed SQLite store shared by a sync seeding session and the CLI."""

    def __init__(self, path):
        self.path = path
        self.engine = create_engine(f"sqlite:///{path}")
        Base.metadata.create_all(self.engine)

    @property
    def async_url(self) -> str:
        return f"sqlite+aiosqlite:///{self.path}"

    def add(self, *rows) -> None:
        with Session(self.engine, expire_on_commit=False) as session:
            session.add_all(rows)
            session.commit()

    def count(self, model) -> int:
        with Session(self.engine) as session:
            return session.scalar(select(func.count()).select_from(model))

    def seed_acme(self, *, with_user: bool = False) -> Location:
        org, merchant = make_customer()
        loc = make_location()
        self.add(org, merchant, loc)
        if with_user:
            self.add(
                User(
                    clerk_organization_id=SAMPLE_ORG_ID,
                    clerk_user_id=SAMPLE_USER_ID,
                    first_name="Jane",
                    last_name="Doe",
                    email="jane@acme.example",
                )
            )
        return loc

    def configure(self, location: Location, phone_number: str, agent_id: str | None = None):
        phone = PhoneNumberConfig(phone_number=phone_number, location_id=location.id)
        self.add(phone)
        if agent_id:
            self.add(AgentConfig(agent_id=agent_id, phone_number_id=phone.id))
        return phone

    def dispose(self) -> None:
        self.engine.dispose()


@pytest.fixture
def store(tmp_path, monkeypatch):
    """Seedable store wired into the CLI through DATABASE_URL."""
    from halocall.config import settings

    s = SyncStore(tmp_path / "halocall.db")
    monkeypatch.setattr(settings, "database_url", s.async_url)
    yield s
    s.dispose()


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()

