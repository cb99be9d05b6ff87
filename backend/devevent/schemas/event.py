"""
Pydantic schemas for event records.

NormalizedEvent is what the validator hands to the persistence layer;
EventResponse is the read model built from a stored row.
"""

from datetime import datetime

from pydantic import BaseModel


class NormalizedEvent(BaseModel):
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    agenda: list[str]
    organizer: str
    tags: list[str]


class EventResponse(NormalizedEvent):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventListResponse(BaseModel):
    events: list[EventResponse]
    total: int
    page: int
    page_size: int
