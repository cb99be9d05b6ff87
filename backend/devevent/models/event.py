"""
Event model.

Key design decisions:
- `slug` carries a unique index; it is the storage-level guarantee that no two
  events share a slug (the validator only derives it)
- `date` and `time` are stored in their canonical string forms
  (UTC timestamp string and 24-hour HH:MM)
- `agenda` and `tags` are ordered JSON arrays of strings
- free-text columns are unbounded `Text`; the validator sets no length limits
"""

from sqlalchemy import JSON, Column, Integer, String, Text

from devevent.db.base import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    image = Column(Text, nullable=False)
    venue = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    date = Column(String(32), nullable=False)
    time = Column(String(5), nullable=False)
    mode = Column(Text, nullable=False)
    audience = Column(Text, nullable=False)
    agenda = Column(JSON, nullable=False)
    organizer = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, slug={self.slug}, date={self.date})>"
