# alumni_server/models/content.py

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Table, JSON
from sqlalchemy.orm import relationship
from alumni_server.core.utils import utcnow
from . import Base


# -------------------------------
# Membership sets
# -------------------------------

# Composite primary keys keep every (entity, user) pair unique.
story_likes = Table(
    "story_likes",
    Base.metadata,
    Column("story_id", Integer, ForeignKey("stories.id"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
    Column("created_at", DateTime, default=utcnow, nullable=False),
)

event_attendees = Table(
    "event_attendees",
    Base.metadata,
    Column("event_id", Integer, ForeignKey("events.id"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
    Column("created_at", DateTime, default=utcnow, nullable=False),
)


class SoftDeleteMixin:
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    deleted_at = Column(DateTime, nullable=True)

    def mark_deleted(self):
        self.is_deleted = True
        self.deleted_at = utcnow()


# -------------------------------
# Stories
# -------------------------------

class Story(SoftDeleteMixin, Base):
    __tablename__ = "stories"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    media_ids = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User")
    comments = relationship("Comment", back_populates="story", order_by="Comment.id")


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    story_id = Column(Integer, ForeignKey("stories.id"), index=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User")
    story = relationship("Story", back_populates="comments")


# -------------------------------
# Events
# -------------------------------

class Event(SoftDeleteMixin, Base):
    """
    An admin-authored gathering. The calendar is kept as two columns,
    event_date and location, and projected back as one object.
    """
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    media_ids = Column(JSON, default=list, nullable=False)
    event_date = Column(DateTime, index=True, nullable=False)
    location = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User")
    attendees = relationship("User", secondary=event_attendees, order_by=event_attendees.c.created_at)
