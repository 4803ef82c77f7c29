"""Feedback ORM model."""
import uuid
from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, CheckConstraint
from confhub.database import Base
from confhub.domain import utcnow


class Feedback(Base):
    __tablename__ = "feedbacks"
    __table_args__ = (CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedback_rating"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
