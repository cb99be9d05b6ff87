"""
Pure normalization helpers used by the event validator.

Every function is side-effect free and returns None (rather than raising)
when the input cannot be normalized, so the caller decides which error to raise.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as dtp

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")
_TIME = re.compile(r"^([0-9]{1,2}):([0-9]{2})(?:\s*(AM|PM))?$", re.IGNORECASE)


def slugify(value: str) -> str:
    """'Next.js Conf 2026!' -> 'nextjs-conf-2026'"""
    slug = value.lower().strip()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    return _HYPHEN_RUN.sub("-", slug)


def format_timestamp(value: datetime) -> str:
    """UTC timestamp with millisecond precision: 2026-03-12T00:00:00.000Z"""
    value = value.astimezone(timezone.utc)
    return f"{value.year:04d}-{value:%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z"


def normalize_date(value: str) -> Optional[str]:
    """
    Parse an ISO-8601 or free-text date ("October 25, 2026") into the
    canonical UTC timestamp string. Naive values are taken as UTC. A missing
    month or day becomes 1, a missing time midnight, and a missing year the
    current one ("March 12").
    """
    if not isinstance(value, str) or not value.strip():
        return None

    start_of_year = datetime(datetime.now(timezone.utc).year, 1, 1)
    try:
        parsed = dtp.parse(value.strip(), default=start_of_year)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return format_timestamp(parsed)
    except (ValueError, OverflowError):
        return None


def normalize_time(value: str) -> Optional[str]:
    """
    'H:MM' / 'HH:MM' with an optional AM/PM marker -> 24-hour 'HH:MM'.

    12 AM is midnight, 12 PM stays 12, any other PM hour gains 12.
    """
    if not isinstance(value, str):
        return None

    match = _TIME.match(value.strip())
    if not match:
        return None

    hours = int(match.group(1))
    minutes = match.group(2)
    meridiem = match.group(3)

    if meridiem:
        if hours == 12:
            hours = 0
        if meridiem.upper() == "PM":
            hours += 12

    if hours > 23 or int(minutes) > 59:
        return None

    return f"{hours:02d}:{minutes}"
