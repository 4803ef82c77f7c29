"""Pydantic schemas for Notifications."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class NotificationOut(BaseModel):
    id: str
    user_id: str
    sender_id: Optional[str] = None
    title: str
    message: str
    type: str
    read: bool
    reference_id: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UnreadCountOut(BaseModel):
    unread_count: int


class MarkAllReadOut(BaseModel):
    marked: int
    unread_count: int


class AnnouncementCreate(BaseModel):
    title: str
    message: str
    event_id: Optional[str] = None  # None broadcasts to every profile


class AnnouncementOut(BaseModel):
    recipients: int


class DispatchOut(BaseModel):
    delivered: int
    failed: int
