"""
Booking persistence. A booking is validated (including the event existence
check against this session) before it is added.
"""

from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.core.logging import get_logger
from devevent.models.booking import Booking
from devevent.services import event_service
from devevent.services.booking_validator import validate_and_normalize

logger = get_logger(__name__)


async def create_booking(db: AsyncSession, payload: Mapping[str, Any]) -> Booking:
    """Validate a raw booking and insert it."""

    async def exists(event_id: int) -> bool:
        return await event_service.event_exists(db, event_id)

    normalized = await validate_and_normalize(payload, exists)

    booking = Booking(event_id=normalized.event_id, email=normalized.email)
    db.add(booking)
    await db.flush()
    await db.refresh(booking)

    logger.info("booking_created", booking_id=booking.id, event_id=booking.event_id)
    return booking


async def list_bookings_for_event(db: AsyncSession, event_id: int) -> list[Booking]:
    """All bookings for an event, oldest first."""
    result = await db.execute(
        select(Booking)
        .where(Booking.event_id == event_id)
        .order_by(Booking.created_at.asc(), Booking.id.asc())
    )
    return list(result.scalars().all())
