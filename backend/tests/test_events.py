"""
Tests for event persistence: validation runs before every write.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.core.errors import DuplicateSlugError, EventNotFoundError, InvalidTimeError, MissingFieldError
from devevent.db.session import get_session, make_sessionmaker
from devevent.models.booking import Booking
from devevent.models.event import Event
from devevent.schemas.event import EventListResponse, EventResponse
from devevent.services import booking_service, event_service


async def count_events(db: AsyncSession) -> int:
    return (await db.execute(select(func.count()).select_from(Event))).scalar()


@pytest.mark.asyncio
async def test_create_event(db_session, event_payload):
    """Stored event carries the normalized values and timestamps."""
    event = await event_service.create_event(db_session, event_payload)

    assert event.id is not None
    assert event.title == "Cloud Next 2026"
    assert event.slug == "cloud-next-2026"
    assert event.date == "2026-10-25T00:00:00.000Z"
    assert event.time == "09:00"
    assert event.agenda == ["Keynote", "Breakout sessions", "Networking"]
    assert event.created_at is not None
    assert event.updated_at is not None

    response = EventResponse.model_validate(event)
    assert response.slug == "cloud-next-2026"


@pytest.mark.asyncio
async def test_invalid_event_is_not_written(db_session, event_payload):
    event_payload["description"] = "   "
    with pytest.raises(MissingFieldError):
        await event_service.create_event(db_session, event_payload)
    assert await count_events(db_session) == 0


@pytest.mark.asyncio
async def test_duplicate_slug_is_rejected(db_session, event_payload):
    await event_service.create_event(db_session, event_payload)

    event_payload["title"] = "cloud next 2026!"
    with pytest.raises(DuplicateSlugError) as exc_info:
        await event_service.create_event(db_session, event_payload)
    assert exc_info.value.slug == "cloud-next-2026"


@pytest.mark.asyncio
async def test_update_without_title_change_keeps_slug(db_session, event_payload):
    event = await event_service.create_event(db_session, event_payload)

    updated = await event_service.update_event(
        db_session, event.id, {"venue": "  Mandalay Bay ", "time": "1:15 PM"}
    )
    assert updated.slug == "cloud-next-2026"
    assert updated.venue == "Mandalay Bay"
    assert updated.time == "13:15"


@pytest.mark.asyncio
async def test_update_title_regenerates_slug(db_session, event_payload):
    event = await event_service.create_event(db_session, event_payload)

    updated = await event_service.update_event(db_session, event.id, {"title": "Cloud Next Las Vegas"})
    assert updated.slug == "cloud-next-las-vegas"
    assert await event_service.get_event_by_slug(db_session, "cloud-next-2026") is None
    assert (await event_service.get_event_by_slug(db_session, "cloud-next-las-vegas")).id == event.id


@pytest.mark.asyncio
async def test_invalid_update_leaves_row_unchanged(db_session, event_payload):
    event = await event_service.create_event(db_session, event_payload)

    with pytest.raises(InvalidTimeError):
        await event_service.update_event(db_session, event.id, {"venue": "Elsewhere", "time": "25:00"})

    stored = await event_service.get_event(db_session, event.id)
    assert stored.venue == "Moscone Center"
    assert stored.time == "09:00"


@pytest.mark.asyncio
async def test_update_missing_event(db_session):
    with pytest.raises(EventNotFoundError):
        await event_service.update_event(db_session, 99999, {"title": "Ghost"})


@pytest.mark.asyncio
async def test_event_exists(db_session, event_payload):
    event = await event_service.create_event(db_session, event_payload)
    assert await event_service.event_exists(db_session, event.id) is True
    assert await event_service.event_exists(db_session, event.id + 1) is False


@pytest.mark.asyncio
async def test_list_events_pagination(db_session, event_payload):
    for n in range(5):
        await event_service.create_event(db_session, {**event_payload, "title": f"Meetup {n}"})

    events, total = await event_service.list_events(db_session, page=1, page_size=2)
    assert total == 5
    assert [e.slug for e in events] == ["meetup-4", "meetup-3"]

    listing = EventListResponse(
        events=[EventResponse.model_validate(e) for e in events],
        total=total,
        page=1,
        page_size=2,
    )
    assert listing.total == 5
    assert [e.title for e in listing.events] == ["Meetup 4", "Meetup 3"]

    events, _ = await event_service.list_events(db_session, page=3, page_size=2)
    assert [e.slug for e in events] == ["meetup-0"]


@pytest.mark.asyncio
async def test_delete_event_does_not_cascade(db_session, event_payload):
    event_id = (await event_service.create_event(db_session, event_payload)).id
    await booking_service.create_booking(db_session, {"event_id": event_id, "email": "dev@example.com"})

    await event_service.delete_event(db_session, event_id)

    assert await event_service.event_exists(db_session, event_id) is False
    remaining = (await db_session.execute(select(Booking))).scalars().all()
    assert [b.event_id for b in remaining] == [event_id]

    with pytest.raises(EventNotFoundError):
        await event_service.delete_event(db_session, event_id)


@pytest.mark.asyncio
async def test_get_session_commits(test_engine, event_payload):
    async with get_session(test_engine) as db:
        await event_service.create_event(db, event_payload)

    async with make_sessionmaker(test_engine)() as db:
        assert await count_events(db) == 1


@pytest.mark.asyncio
async def test_get_session_rolls_back_on_error(test_engine, event_payload):
    with pytest.raises(DuplicateSlugError):
        async with get_session(test_engine) as db:
            await event_service.create_event(db, event_payload)
            await event_service.create_event(db, event_payload)

    async with make_sessionmaker(test_engine)() as db:
        assert await count_events(db) == 0


@pytest.mark.asyncio
async def test_long_free_text_fields_are_stored(db_session, event_payload):
    """Free-text columns carry no length limit, matching the validator."""
    for column in ("title", "slug", "image", "venue", "location", "mode", "audience", "organizer"):
        assert Event.__table__.c[column].type.length is None
    assert Booking.__table__.c["email"].type.length is None

    event_payload["mode"] = "in-person with a livestream " * 10
    event_payload["title"] = "A very long conference title " * 20
    event = await event_service.create_event(db_session, event_payload)
    assert event.mode == event_payload["mode"].strip()
    assert len(event.slug) > 255
