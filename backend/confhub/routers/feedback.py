"""Feedback API routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from confhub.database import get_db
from confhub.dependencies import get_current_profile, require_staff
from confhub.models.profile import Profile
from confhub.schemas.feedback import FeedbackCreate, FeedbackOut, FeedbackSummary
from confhub.services import feedback_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=FeedbackOut, status_code=status.HTTP_201_CREATED)
def submit_feedback(
    payload: FeedbackCreate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    return feedback_service.submit_feedback(db, profile.id, payload.rating, payload.comment, payload.event_id)


@router.get("/summary", response_model=FeedbackSummary)
def feedback_summary(
    event_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    _: Profile = Depends(require_staff),
):
    return feedback_service.summarize(db, event_id)
