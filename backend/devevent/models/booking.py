"""
Booking model: one email address registered for one event.

`event_id` is indexed but is not a foreign key. Existence of the
event is checked once when the booking is created; deleting an event later
leaves its bookings in place.
"""

from sqlalchemy import Column, Integer, Text

from devevent.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, nullable=False, index=True)
    email = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event={self.event_id}, email={self.email})>"
