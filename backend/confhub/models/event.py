"""Event and EventSpeaker ORM models."""
import uuid
from sqlalchemy import Column, String, Text, Date, Time, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from confhub.database import Base
from confhub.domain import EventStatus


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    venue = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False, default=100)
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.upcoming)
    created_by = Column(String(36), ForeignKey("profiles.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    speakers = relationship(
        "EventSpeaker", back_populates="event", cascade="all, delete-orphan", order_by="EventSpeaker.position"
    )
    attendees = relationship("EventAttendee", back_populates="event", cascade="all, delete-orphan")


class EventSpeaker(Base):
    __tablename__ = "event_speakers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False)
    name = Column(String(150), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    event = relationship("Event", back_populates="speakers")
