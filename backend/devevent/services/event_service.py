"""
Event persistence. Every write goes through the event validator first.
"""

from typing import Any, Mapping, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.core.errors import DuplicateSlugError, EventNotFoundError
from devevent.core.logging import get_logger
from devevent.models.event import Event
from devevent.schemas.event import NormalizedEvent
from devevent.services.event_validator import LIST_FIELDS, REQUIRED_STRING_FIELDS, validate_and_normalize

logger = get_logger(__name__)

EDITABLE_FIELDS = REQUIRED_STRING_FIELDS + LIST_FIELDS


def _snapshot(event: Event) -> dict[str, Any]:
    return {field: getattr(event, field) for field in EDITABLE_FIELDS + ("slug",)}


async def _flush(db: AsyncSession, slug: str) -> None:
    try:
        await db.flush()
    except IntegrityError as exc:
        logger.warning("event_slug_conflict", slug=slug)
        raise DuplicateSlugError(slug) from exc


async def create_event(db: AsyncSession, payload: Mapping[str, Any]) -> Event:
    """Validate a raw event and insert it."""
    normalized = validate_and_normalize(payload)

    event = Event(**normalized.model_dump())
    db.add(event)
    await _flush(db, normalized.slug)
    await db.refresh(event)

    logger.info("event_created", event_id=event.id, slug=event.slug, date=event.date)
    return event


async def update_event(db: AsyncSession, event_id: int, changes: Mapping[str, Any]) -> Event:
    """
    Apply `changes` on top of the stored event and re-validate the result.
    The slug only changes when the title does.
    """
    event = await get_event(db, event_id)
    previous = _snapshot(event)

    merged = {field: previous[field] for field in EDITABLE_FIELDS}
    merged.update({k: v for k, v in changes.items() if k in EDITABLE_FIELDS})

    normalized: NormalizedEvent = validate_and_normalize(merged, previous=previous)
    for field, value in normalized.model_dump().items():
        setattr(event, field, value)

    await _flush(db, normalized.slug)
    await db.refresh(event)

    logger.info(
        "event_updated",
        event_id=event.id,
        slug=event.slug,
        slug_changed=event.slug != previous["slug"],
    )
    return event


async def get_event(db: AsyncSession, event_id: int) -> Event:
    result = await db.execute(select(Event).where(Event.id == event_id))
    event = result.scalar_one_or_none()
    if not event:
        raise EventNotFoundError(event_id)
    return event


async def get_event_by_slug(db: AsyncSession, slug: str) -> Optional[Event]:
    result = await db.execute(select(Event).where(Event.slug == slug))
    return result.scalar_one_or_none()


async def event_exists(db: AsyncSession, event_id: int) -> bool:
    result = await db.execute(select(Event.id).where(Event.id == event_id).limit(1))
    return result.scalar_one_or_none() is not None


async def list_events(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Event], int]:
    """Newest events first, paginated."""
    total = (await db.execute(select(func.count()).select_from(Event))).scalar()

    result = await db.execute(
        select(Event)
        .order_by(Event.created_at.desc(), Event.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(result.scalars().all()), total


async def delete_event(db: AsyncSession, event_id: int) -> None:
    """Remove an event. Bookings that reference it are left untouched."""
    result = await db.execute(delete(Event).where(Event.id == event_id))
    if result.rowcount == 0:
        raise EventNotFoundError(event_id)
    logger.info("event_deleted", event_id=event_id)
