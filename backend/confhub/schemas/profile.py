"""Pydantic schemas for Profiles."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class ProfileCreate(BaseModel):
    id: Optional[str] = None  # the auth provider's user id, when syncing
    email: Optional[str] = None
    name: str
    role: str = "attendee"


class ProfileRoleUpdate(BaseModel):
    role: str


class ProfileOut(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
