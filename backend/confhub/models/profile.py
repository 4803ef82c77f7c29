"""Profile ORM model: identity record mirrored from the auth provider."""
import uuid
from sqlalchemy import Column, String, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from confhub.database import Base
from confhub.domain import Role


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=True, unique=True)
    name = Column(String(150), nullable=True)
    role = Column(SAEnum(Role), nullable=False, default=Role.attendee)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
