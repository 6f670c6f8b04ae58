"""Phone number and voice agent bindings created by the setup workflow."""

from __future__ import annotations

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, BigIntIDMixin, BigIntPK, OrganizationMixin, TimestampMixin


class PhoneNumberConfig(BigIntIDMixin, TimestampMixin, Base):
    __tablename__ = "phone_number_config"

    phone_number: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    location_id: Mapped[int] = mapped_column(
        BigIntPK, ForeignKey("location.id", ondelete="CASCADE"), index=True
    )

    location: Mapped["Location"] = relationship(  # noqa: F821
        back_populates="phone_numbers"
    )
    agent: Mapped[AgentConfig | None] = relationship(
        "AgentConfig", back_populates="phone_number", cascade="all, delete-orphan", uselist=False
    )

    def __repr__(self) -> str:
        return f"<PhoneNumberConfig {self.phone_number!r}>"


class AgentConfig(BigIntIDMixin, TimestampMixin, Base):
    """External voice agent bound to exactly one phone number."""

    __tablename__ = "agent_config"

    agent_id: Mapped[str] = mapped_column(String(200))
    phone_number_id: Mapped[int] = mapped_column(
        BigIntPK,
        ForeignKey("phone_number_config.id", ondelete="CASCADE"),
        unique=True,
    )

    phone_number: Mapped[PhoneNumberConfig] = relationship(back_populates="agent")

    def __repr__(self) -> str:
        return f"<AgentConfig {self.agent_id!r}>"


class UserLocationAccess(BigIntIDMixin, TimestampMixin, OrganizationMixin, Base):
    __tablename__ = "user_location_access"
    __table_args__ = (
        UniqueConstraint(
            "clerk_organization_id",
            "clerk_user_id",
            "location_id",
            name="uq_user_location_access",
        ),
    )

    clerk_user_id: Mapped[str] = mapped_column(String(100), index=True)
    location_id: Mapped[int] = mapped_column(
        BigIntPK, ForeignKey("location.id", ondelete="CASCADE"), index=True
    )
