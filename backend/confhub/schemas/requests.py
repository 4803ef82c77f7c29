"""Pydantic schemas for mic requests and complaints."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class MicRequestCreate(BaseModel):
    event_id: str
    reason: str


class ComplaintCreate(BaseModel):
    event_id: str
    issue_type: str
    description: str


class MicRequestOut(BaseModel):
    id: str
    event_id: str
    user_id: str
    reason: str
    status: str
    created_at: datetime
    requester_name: Optional[str] = None
    event_title: Optional[str] = None

    model_config = {"from_attributes": True}


class ComplaintOut(BaseModel):
    id: str
    event_id: str
    user_id: str
    issue_type: str
    description: str
    status: str
    created_at: datetime
    requester_name: Optional[str] = None
    event_title: Optional[str] = None

    model_config = {"from_attributes": True}
