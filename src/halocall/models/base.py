"""Base model classes and mixins for HaloCall models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
BigIntPK = BigInteger().with_variant(Integer, "sqlite")
JSONDocument = JSON().with_variant(JSONB, "postgresql")


class Base(DeclarativeBase):
    pass


class BigIntIDMixin:
    """Adds an auto-incrementing bigint primary key."""

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)


class TimestampMixin:
    """Adds created_at / updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class OrganizationMixin:
    """Adds the clerk_organization_id FK used for tenant isolation."""

    clerk_organization_id: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("organization.clerk_organization_id", ondelete="CASCADE"),
        index=True,
    )
