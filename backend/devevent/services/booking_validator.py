"""
Booking validation.

The existence check is a point-in-time read: nothing stops the referenced
event from being deleted after the booking is written.
"""

import re
from typing import Any, Awaitable, Callable, Mapping, Optional

from devevent.core.errors import (
    DanglingReferenceError,
    InvalidEmailError,
    InvalidReferenceFormatError,
)
from devevent.schemas.booking import NormalizedBooking

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

EventExists = Callable[[int], Awaitable[bool]]


def parse_event_id(value: Any) -> Optional[int]:
    """Positive int, or a string of ASCII digits. Anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        value = value.strip()
        if value.isascii() and value.isdigit() and int(value) > 0:
            return int(value)
    return None


def normalize_email(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    email = value.strip().lower()
    if not EMAIL_PATTERN.fullmatch(email):
        return None
    return email


async def validate_and_normalize(
    record: Mapping[str, Any],
    event_exists: EventExists,
) -> NormalizedBooking:
    """
    Check reference format, then email, then that the event exists.
    Only the last step touches storage.
    """
    event_id = parse_event_id(record.get("event_id"))
    if event_id is None:
        raise InvalidReferenceFormatError("event_id")

    email = normalize_email(record.get("email"))
    if email is None:
        raise InvalidEmailError()

    if not await event_exists(event_id):
        raise DanglingReferenceError(event_id)

    return NormalizedBooking(event_id=event_id, email=email)
