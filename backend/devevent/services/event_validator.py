"""
Event validation and normalization.

Runs once, immediately before an event row is written. Steps run in a
fixed order and the first failure aborts the whole record:

  1. required string fields are present and trimmed
  2. slug is (re)derived when the title is new or changed
  3. date is normalized to a UTC timestamp string
  4. time is normalized to 24-hour HH:MM
  5. agenda and tags are non-empty lists of non-empty strings

Slug uniqueness is not checked here; the unique index on events.slug
enforces it at write time.
"""

from typing import Any, Mapping, Optional

from devevent.core.errors import (
    InvalidDateError,
    InvalidListFieldError,
    InvalidTimeError,
    MissingFieldError,
)
from devevent.schemas.event import NormalizedEvent
from devevent.services.normalize import normalize_date, normalize_time, slugify

REQUIRED_STRING_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "organizer",
)

LIST_FIELDS = ("agenda", "tags")


def _clean_list(field: str, value: Any) -> list[str]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise InvalidListFieldError(field)
    if not value:
        raise InvalidListFieldError(field)

    items = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise InvalidListFieldError(field)
        items.append(item.strip())
    return items


def validate_and_normalize(
    record: Mapping[str, Any],
    previous: Optional[Mapping[str, Any]] = None,
) -> NormalizedEvent:
    """
    Validate a raw event mapping and return its normalized form.

    `previous` is the currently stored version of the event (None for a new
    one). Its title decides whether the slug is regenerated; its slug is
    carried over when the title is unchanged.

    Raises a ValidationError subclass on the first failing step.
    """
    data: dict[str, Any] = {}

    for field in REQUIRED_STRING_FIELDS:
        value = record.get(field)
        if not isinstance(value, str) or not value.strip():
            raise MissingFieldError(field)
        data[field] = value.strip()

    if previous is None or previous.get("title") != data["title"] or not previous.get("slug"):
        data["slug"] = slugify(data["title"])
    else:
        data["slug"] = previous["slug"]

    normalized_date = normalize_date(data["date"])
    if normalized_date is None:
        raise InvalidDateError(data["date"])
    data["date"] = normalized_date

    normalized_time = normalize_time(data["time"])
    if normalized_time is None:
        raise InvalidTimeError(data["time"])
    data["time"] = normalized_time

    for field in LIST_FIELDS:
        data[field] = _clean_list(field, record.get(field))

    return NormalizedEvent(**data)
