"""Complaint ORM model: same lifecycle as MicRequest."""
import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Enum as SAEnum
from confhub.database import Base
from confhub.domain import RequestStatus, utcnow


class Complaint(Base):
    __tablename__ = "complaints"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    issue_type = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(SAEnum(RequestStatus), nullable=False, default=RequestStatus.pending)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
