"""Core event service: event lifecycle, registration and QR check-in.

Responsibilities:
- Authorization hook: admins, or the organizer who created the event, may modify it
- Event-update fan-out: status/date/time/venue changes notify registered attendees
  in the same transaction as the change
- Deletion policy: blocked while mic requests, complaints or feedback reference the event
- Registration with capacity enforcement, QR check-in via per-attendee code
"""
import logging
from datetime import date as date_type, datetime, time as time_type, timezone
from typing import Any, Optional

import pytz
from sqlalchemy.orm import Session

from confhub.config import settings
from confhub.domain import STAFF_ROLES, EventStatus, Notification, NotificationType, Role
from confhub.errors import Conflict, DuplicateRequest, Forbidden, NotFound, ValidationError
from confhub.models.attendee import EventAttendee
from confhub.models.complaint import Complaint
from confhub.models.event import Event, EventSpeaker
from confhub.models.feedback import Feedback
from confhub.models.mic_request import MicRequest
from confhub.models.profile import Profile
from confhub.repositories.sql import stage_notification

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "date", "time", "venue", "capacity", "status")
# Changes to these fields are announced to registered attendees.
NOTIFY_FIELDS = ("status", "date", "time", "venue")


def starts_at(event: Event) -> datetime:
    """Event start as an aware datetime in the configured conference timezone."""
    tz = pytz.timezone(settings.CONFERENCE_TIMEZONE)
    return tz.localize(datetime.combine(event.date, event.time))


def _check_staff(actor: Profile) -> None:
    if actor.role not in STAFF_ROLES:
        raise Forbidden("Only admins and organizers may manage events")


def _check_can_modify(event: Event, actor: Profile) -> None:
    """Admins may modify any event; organizers only the ones they created."""
    _check_staff(actor)
    if actor.role == Role.organizer and event.created_by != actor.id:
        raise Forbidden("Only the organizer who created this event (or an admin) may modify it")


def get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFound("Event not found")
    return event


def registered_user_ids(db: Session, event_id: str) -> list[str]:
    rows = db.query(EventAttendee.user_id).filter(EventAttendee.event_id == event_id).all()
    return [uid for (uid,) in rows]


def _set_speakers(event: Event, names: list[str]) -> None:
    event.speakers = [
        EventSpeaker(name=name.strip(), position=i)
        for i, name in enumerate(names)
        if name and name.strip()
    ]


def _parse_status(value) -> EventStatus:
    try:
        return EventStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid event status: {value}")


def create_event(
    db: Session,
    actor: Profile,
    title: str,
    date: date_type,
    time: time_type,
    venue: str,
    capacity: int = 100,
    description: Optional[str] = None,
    status: str = "upcoming",
    speakers: Optional[list[str]] = None,
) -> Event:
    _check_staff(actor)
    if not title.strip() or not venue.strip():
        raise ValidationError("title and venue must not be empty")
    if capacity < 1:
        raise ValidationError("capacity must be at least 1")

    event = Event(
        title=title.strip(),
        description=description,
        date=date,
        time=time,
        venue=venue.strip(),
        capacity=capacity,
        status=_parse_status(status),
        created_by=actor.id,
    )
    _set_speakers(event, speakers or [])
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) by %s", event.title, event.id, actor.id)
    return event


def _describe_change(event: Event, changed: list[str]) -> str:
    parts = []
    if "status" in changed:
        parts.append(f'"{event.title}" is now {event.status.value}.')
    if any(field in changed for field in ("date", "time", "venue")):
        when = starts_at(event).strftime("%Y-%m-%d %H:%M")
        parts.append(f'"{event.title}" has been rescheduled: {when} at {event.venue}.')
    return " ".join(parts)


def update_event(db: Session, event_id: str, actor: Profile, updates: dict[str, Any]) -> Event:
    """Apply a partial update; notify registered attendees of schedule/status changes."""
    event = get_event(db, event_id)
    _check_can_modify(event, actor)

    speakers = updates.pop("speakers", None)
    changed = []
    for field, value in updates.items():
        if field not in EDITABLE_FIELDS or value is None:
            continue
        if field == "status":
            value = _parse_status(value)
        if field == "capacity":
            if value < 1:
                raise ValidationError("capacity must be at least 1")
            registered = db.query(EventAttendee).filter(EventAttendee.event_id == event.id).count()
            if value < registered:
                raise Conflict(f"capacity cannot be lower than the {registered} current registrations")
        if getattr(event, field) != value:
            setattr(event, field, value)
            changed.append(field)
    if speakers is not None:
        _set_speakers(event, speakers)

    event.updated_at = datetime.now(timezone.utc)

    notify = [f for f in changed if f in NOTIFY_FIELDS]
    recipients = registered_user_ids(db, event.id) if notify else []
    for uid in recipients:
        stage_notification(db, Notification(
            user_id=uid,
            sender_id=actor.id,
            title="Event Update",
            message=_describe_change(event, notify),
            type=NotificationType.event_update,
            reference_id=event.id,
        ))

    db.commit()
    db.refresh(event)
    logger.info("Updated event %s (%s); notified %d attendees", event_id, ", ".join(changed) or "no changes", len(recipients))
    return event


def delete_event(db: Session, event_id: str, actor: Profile) -> None:
    """Hard-delete an event that no request or feedback references."""
    event = get_event(db, event_id)
    _check_can_modify(event, actor)

    dependents = (
        db.query(MicRequest).filter(MicRequest.event_id == event_id).count()
        + db.query(Complaint).filter(Complaint.event_id == event_id).count()
        + db.query(Feedback).filter(Feedback.event_id == event_id).count()
    )
    if dependents:
        raise Conflict(
            f"Event has {dependents} mic requests, complaints or feedback entries and cannot be deleted; "
            "mark it completed instead"
        )

    db.delete(event)
    db.commit()
    logger.info("Deleted event %s by %s", event_id, actor.id)


def register(db: Session, event_id: str, user_id: str) -> EventAttendee:
    event = get_event(db, event_id)
    if event.status == EventStatus.completed:
        raise ValidationError("Registration is closed for completed events")

    existing = (
        db.query(EventAttendee)
        .filter(EventAttendee.event_id == event_id, EventAttendee.user_id == user_id)
        .first()
    )
    if existing:
        raise DuplicateRequest("You're already registered for this event")

    taken = db.query(EventAttendee).filter(EventAttendee.event_id == event_id).count()
    if taken >= event.capacity:
        raise Conflict("Event is at full capacity")

    attendee = EventAttendee(event_id=event_id, user_id=user_id, checked_in=False)
    db.add(attendee)
    db.commit()
    db.refresh(attendee)
    logger.info("User %s registered for event %s", user_id, event_id)
    return attendee


def cancel_registration(db: Session, event_id: str, user_id: str) -> None:
    attendee = (
        db.query(EventAttendee)
        .filter(EventAttendee.event_id == event_id, EventAttendee.user_id == user_id)
        .first()
    )
    if not attendee:
        raise NotFound("You are not registered for this event")
    db.delete(attendee)
    db.commit()
    logger.info("User %s cancelled registration for event %s", user_id, event_id)


def check_in(db: Session, event_id: str, code: str, actor: Profile) -> EventAttendee:
    """Check an attendee in from the code encoded in their QR ticket (idempotent)."""
    _check_staff(actor)
    attendee = (
        db.query(EventAttendee)
        .filter(EventAttendee.event_id == event_id, EventAttendee.check_in_code == code)
        .first()
    )
    if not attendee:
        raise NotFound("No registration matches this check-in code")
    if attendee.checked_in:
        return attendee

    attendee.checked_in = True
    attendee.checked_in_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(attendee)
    logger.info("User %s checked in to event %s by %s", attendee.user_id, event_id, actor.id)
    return attendee
