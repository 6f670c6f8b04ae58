"""Phone number validation and display formatting helpers."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")

NO_ADDRESS = "No address"

ADDRESS_FIELDS = (
    "address_line_1",
    "locality",
    "administrative_district_level_1",
    "postal_code",
)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def is_valid_phone_number(value: Any) -> bool:
    """True if value is an E.164 number such as +15551234567."""
    if not isinstance(value, str):
        return False
    return E164_PATTERN.fullmatch(value) is not None


def format_address(address: dict[str, Any] | None) -> str:
    """Join the known address parts, or return "No address"."""
    if not address:
        return NO_ADDRESS
    parts = [str(address[key]) for key in ADDRESS_FIELDS if address.get(key)]
    return ", ".join(parts) or NO_ADDRESS


def format_date(value: datetime) -> str:
    """Render e.g. ``Jan 5, 2025, 3:07 PM`` for display, in local time when aware."""
    if value.tzinfo is not None:
        value = value.astimezone()
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return (
        f"{_MONTHS[value.month - 1]} {value.day}, {value.year}, "
        f"{hour}:{value.minute:02d} {meridiem}"
    )
