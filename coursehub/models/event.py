# coursehub/models/event.py
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from coursehub.core.database import Base

_JSON = JSON().with_variant(JSONB, "postgresql")


class Event(Base):
    """Append-only analytics event (``referral_used``, ``course_purchased``, ...)."""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    event_type = Column(String(100), nullable=False, index=True)
    # "metadata" is reserved on declarative classes
    event_metadata = Column("metadata", _JSON, nullable=False, default=dict)
    timestamp = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )

    def __repr__(self):
        return f"<Event(id={self.id}, type='{self.event_type}', user_id={self.user_id})>"


class PageView(Base):
    __tablename__ = "page_views"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    page = Column(String(500), nullable=False)
    event_metadata = Column("metadata", _JSON, nullable=False, default=dict)
    timestamp = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )

    def __repr__(self):
        return f"<PageView(id={self.id}, page='{self.page}', user_id={self.user_id})>"
