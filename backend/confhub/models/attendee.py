"""EventAttendee ORM model: registration and QR check-in state."""
import secrets
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from confhub.database import Base


def generate_check_in_code() -> str:
    return secrets.token_urlsafe(12)


class EventAttendee(Base):
    __tablename__ = "event_attendees"

    event_id = Column(String(36), ForeignKey("events.id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("profiles.id"), primary_key=True)
    check_in_code = Column(String(32), nullable=False, unique=True, default=generate_check_in_code)
    checked_in = Column(Boolean, nullable=False, default=False)
    checked_in_at = Column(DateTime(timezone=True), nullable=True)
    registered_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="attendees")
