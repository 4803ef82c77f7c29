"""Pydantic schemas for Events, registrations and check-in."""
import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field


class EventCreate(BaseModel):
    title: str
    description: Optional[str] = None
    date: dt.date
    time: dt.time
    venue: str
    capacity: int = 100
    status: str = "upcoming"
    speakers: list[str] = []


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    venue: Optional[str] = None
    capacity: Optional[int] = None
    status: Optional[str] = None
    speakers: Optional[list[str]] = None


class SpeakerOut(BaseModel):
    name: str

    model_config = {"from_attributes": True}


class EventOut(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    date: dt.date
    time: dt.time
    venue: str
    capacity: int
    status: str
    created_by: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    speakers: list[SpeakerOut] = []

    model_config = {"from_attributes": True}


class RegistrationOut(BaseModel):
    event_id: str
    user_id: str
    check_in_code: str
    checked_in: bool
    checked_in_at: Optional[dt.datetime] = None
    registered_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class AttendeeOut(BaseModel):
    """Registration as seen by staff; the check-in code is not exposed."""

    user_id: str
    checked_in: bool
    checked_in_at: Optional[dt.datetime] = None
    registered_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class CheckInPayload(BaseModel):
    code: str = Field(..., min_length=1)
