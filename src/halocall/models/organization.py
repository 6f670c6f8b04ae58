"""Organization, merchant and user models - rows owned by the OAuth callback."""

from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, BigIntIDMixin, OrganizationMixin, TimestampMixin


class Organization(TimestampMixin, Base):
    __tablename__ = "organization"

    clerk_organization_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    clerk_organization_name: Mapped[str] = mapped_column(String(200))

    # Relationships
    merchant: Mapped[Merchant | None] = relationship(
        "Merchant", back_populates="organization", uselist=False
    )
    locations: Mapped[list["Location"]] = relationship(  # noqa: F821
        back_populates="organization", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Organization {self.clerk_organization_id!r}>"


class Merchant(BigIntIDMixin, TimestampMixin, OrganizationMixin, Base):
    """POS account connection, one per organization."""

    __tablename__ = "merchant"

    merchant_id: Mapped[str] = mapped_column(String(100), index=True)
    is_sandbox: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    organization: Mapped[Organization] = relationship(back_populates="merchant")

    def __repr__(self) -> str:
        return f"<Merchant {self.merchant_id!r}>"


class User(BigIntIDMixin, TimestampMixin, OrganizationMixin, Base):
    __tablename__ = "user"

    clerk_user_id: Mapped[str] = mapped_column(String(100), index=True)
    first_name: Mapped[str | None] = mapped_column(String(100), default=None)
    last_name: Mapped[str | None] = mapped_column(String(100), default=None)
    email: Mapped[str | None] = mapped_column(String(255), default=None)

    @property
    def full_name(self) -> str:
        parts = [self.first_name or "", self.last_name or ""]
        return " ".join(p for p in parts if p).strip()
