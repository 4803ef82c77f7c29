"""Notification API routes: feed, read-state, announcements and outbox dispatch."""
import logging
from typing import Callable, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from confhub.database import get_db
from confhub.dependencies import (
    get_current_profile,
    get_dispatch_job,
    get_dispatcher,
    get_notification_service,
    require_admin,
    require_staff,
)
from confhub.models.profile import Profile
from confhub.schemas.notification import (
    AnnouncementCreate,
    AnnouncementOut,
    DispatchOut,
    MarkAllReadOut,
    NotificationOut,
    UnreadCountOut,
)
from confhub.services import event_service
from confhub.services.delivery import DispatchReport, NotificationDispatcher
from confhub.services.notification_service import NotificationService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[NotificationOut])
def list_notifications(
    limit: Optional[int] = Query(None, ge=1, le=200),
    profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
):
    """The caller's notifications, newest first."""
    return service.list_notifications(profile.id, limit)


@router.get("/unread-count", response_model=UnreadCountOut)
def unread_count(
    profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
):
    return UnreadCountOut(unread_count=service.unread_count(profile.id))


@router.post("/read-all", response_model=MarkAllReadOut)
def mark_all_as_read(
    profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
):
    marked = service.mark_all_as_read(profile.id)
    return MarkAllReadOut(marked=marked, unread_count=service.unread_count(profile.id))


@router.post("/{notification_id}/read", response_model=NotificationOut)
def mark_as_read(
    notification_id: str,
    profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
):
    return service.mark_as_read(notification_id, profile.id)


@router.post("/announcements", response_model=AnnouncementOut, status_code=status.HTTP_201_CREATED)
def send_announcement(
    payload: AnnouncementCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    actor: Profile = Depends(require_staff),
    service: NotificationService = Depends(get_notification_service),
    dispatch_job: Callable[[], DispatchReport] = Depends(get_dispatch_job),
):
    """Broadcast to an event's registered attendees, or to everyone."""
    if payload.event_id:
        event_service.get_event(db, payload.event_id)
        recipients = event_service.registered_user_ids(db, payload.event_id)
    else:
        recipients = [pid for (pid,) in db.query(Profile.id).all()]

    sent = service.send_announcement(
        actor.role, actor.id, recipients, payload.title, payload.message, reference_id=payload.event_id
    )
    background_tasks.add_task(dispatch_job)
    return AnnouncementOut(recipients=len(sent))


@router.post("/dispatch", response_model=DispatchOut)
def dispatch_outbox(
    _: Profile = Depends(require_admin),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Retry pushing undelivered notifications (admin only)."""
    report = dispatcher.dispatch_pending()
    return DispatchOut(delivered=report.delivered, failed=report.failed)
