"""
Pydantic schemas for booking records.
"""

from datetime import datetime

from pydantic import BaseModel


class NormalizedBooking(BaseModel):
    event_id: int
    email: str


class BookingResponse(NormalizedBooking):
    id: int
    created_at: datetime

    model_config = {"from_attributes": True}
