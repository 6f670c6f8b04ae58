"""Location model - a business site synced from the POS account."""

from __future__ import annotations

from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, BigIntIDMixin, JSONDocument, OrganizationMixin, TimestampMixin


class Location(BigIntIDMixin, TimestampMixin, OrganizationMixin, Base):
    __tablename__ = "location"

    merchant_location_id: Mapped[str] = mapped_column(String(100), index=True)
    timezone: Mapped[str] = mapped_column(String(50), default="UTC")
    # address_line_1, locality, administrative_district_level_1, postal_code
    address: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, default=None)

    # Relationships
    organization: Mapped["Organization"] = relationship(  # noqa: F821
        back_populates="locations"
    )
    phone_numbers: Mapped[list["PhoneNumberConfig"]] = relationship(  # noqa: F821
        back_populates="location", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Location {self.id} {self.merchant_location_id!r}>"
