"""Event API routes: delegates to event_service for invariant enforcement."""
import logging
from typing import Callable, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from confhub.database import get_db
from confhub.dependencies import get_current_profile, get_dispatch_job, require_staff
from confhub.domain import EventStatus
from confhub.errors import ValidationError
from confhub.models.attendee import EventAttendee
from confhub.models.event import Event
from confhub.models.profile import Profile
from confhub.schemas.event import (
    AttendeeOut,
    CheckInPayload,
    EventCreate,
    EventOut,
    EventUpdate,
    RegistrationOut,
)
from confhub.services import event_service
from confhub.services.delivery import DispatchReport

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: Session = Depends(get_db), actor: Profile = Depends(require_staff)):
    """Create a new event (admins and organizers)."""
    return event_service.create_event(
        db=db,
        actor=actor,
        title=payload.title,
        description=payload.description,
        date=payload.date,
        time=payload.time,
        venue=payload.venue,
        capacity=payload.capacity,
        status=payload.status,
        speakers=payload.speakers,
    )


@router.get("/", response_model=list[EventOut])
def list_events(
    status_filter: Optional[str] = Query(None, alias="status"),
    include_completed: bool = Query(True),
    db: Session = Depends(get_db),
):
    """List events ordered by date, optionally filtered by status."""
    query = db.query(Event)
    if status_filter:
        try:
            query = query.filter(Event.status == EventStatus(status_filter))
        except ValueError:
            raise ValidationError(f"Invalid event status: {status_filter}")
    if not include_completed:
        query = query.filter(Event.status != EventStatus.completed)
    return query.order_by(Event.date, Event.time).all()


@router.get("/registrations/mine", response_model=list[RegistrationOut])
def my_registrations(db: Session = Depends(get_db), profile: Profile = Depends(get_current_profile)):
    """The caller's registrations, including the QR check-in codes."""
    return db.query(EventAttendee).filter(EventAttendee.user_id == profile.id).all()


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db)):
    return event_service.get_event(db, event_id)


@router.patch("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    actor: Profile = Depends(require_staff),
    dispatch_job: Callable[[], DispatchReport] = Depends(get_dispatch_job),
):
    """Partial update; status or schedule changes notify registered attendees."""
    event = event_service.update_event(db, event_id, actor, payload.model_dump(exclude_unset=True))
    background_tasks.add_task(dispatch_job)
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, db: Session = Depends(get_db), actor: Profile = Depends(require_staff)):
    """Delete an event; refused while requests reference it."""
    event_service.delete_event(db, event_id, actor)


@router.post("/{event_id}/register", response_model=RegistrationOut, status_code=status.HTTP_201_CREATED)
def register(event_id: str, db: Session = Depends(get_db), profile: Profile = Depends(get_current_profile)):
    return event_service.register(db, event_id, profile.id)


@router.delete("/{event_id}/register", status_code=status.HTTP_204_NO_CONTENT)
def cancel_registration(event_id: str, db: Session = Depends(get_db), profile: Profile = Depends(get_current_profile)):
    event_service.cancel_registration(db, event_id, profile.id)


@router.get("/{event_id}/attendees", response_model=list[AttendeeOut])
def list_attendees(event_id: str, db: Session = Depends(get_db), _: Profile = Depends(require_staff)):
    event_service.get_event(db, event_id)
    return db.query(EventAttendee).filter(EventAttendee.event_id == event_id).all()


@router.post("/{event_id}/check-in", response_model=AttendeeOut)
def check_in(
    event_id: str,
    payload: CheckInPayload,
    db: Session = Depends(get_db),
    actor: Profile = Depends(require_staff),
):
    """Check an attendee in using the code scanned from their QR ticket."""
    return event_service.check_in(db, event_id, payload.code, actor)
