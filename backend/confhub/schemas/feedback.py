"""Pydantic schemas for Feedback."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class FeedbackCreate(BaseModel):
    rating: int
    comment: Optional[str] = None
    event_id: Optional[str] = None


class FeedbackOut(BaseModel):
    id: str
    user_id: str
    event_id: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class FeedbackSummary(BaseModel):
    total: int
    average: Optional[float] = None
    distribution: list[int]
    percentages: list[int]
    latest: list[FeedbackOut]
