from devevent.schemas.event import NormalizedEvent, EventResponse, EventListResponse
from devevent.schemas.booking import NormalizedBooking, BookingResponse

__all__ = [
    "NormalizedEvent", "EventResponse", "EventListResponse",
    "NormalizedBooking", "BookingResponse",
]
