"""Admin dashboard statistics."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from confhub.database import get_db
from confhub.dependencies import require_staff
from confhub.domain import EventStatus, RequestStatus
from confhub.models.complaint import Complaint
from confhub.models.event import Event
from confhub.models.mic_request import MicRequest
from confhub.models.profile import Profile

router = APIRouter()


class DashboardStats(BaseModel):
    total_events: int
    upcoming_events: int
    total_profiles: int
    pending_mic_requests: int
    pending_complaints: int


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(db: Session = Depends(get_db), _: Profile = Depends(require_staff)):
    return DashboardStats(
        total_events=db.query(Event).count(),
        upcoming_events=db.query(Event).filter(Event.status == EventStatus.upcoming).count(),
        total_profiles=db.query(Profile).count(),
        pending_mic_requests=db.query(MicRequest).filter(MicRequest.status == RequestStatus.pending).count(),
        pending_complaints=db.query(Complaint).filter(Complaint.status == RequestStatus.pending).count(),
    )
