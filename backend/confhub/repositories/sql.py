"""SQLAlchemy-backed implementation of the request and notification stores.

A status transition, its notification row and the matching outbox row are
committed together; any exception rolls the whole unit back.
"""
import logging
from contextlib import contextmanager
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from confhub.domain import (
    ACTIVE_STATUSES,
    Complaint,
    EventSummary,
    MicRequest,
    Notification,
    OutboxEntry,
    Request,
    RequestKind,
    RequestStatus,
    utcnow,
)
from confhub.models.complaint import Complaint as ComplaintRow
from confhub.models.event import Event as EventRow
from confhub.models.mic_request import MicRequest as MicRequestRow
from confhub.models.notification import Notification as NotificationRow, NotificationOutbox
from confhub.models.profile import Profile

logger = logging.getLogger(__name__)

_ROWS = {
    RequestKind.mic_request: MicRequestRow,
    RequestKind.complaint: ComplaintRow,
}


def _to_request(kind: RequestKind, row) -> Request:
    if kind == RequestKind.mic_request:
        return MicRequest(
            id=row.id,
            event_id=row.event_id,
            user_id=row.user_id,
            reason=row.reason,
            status=row.status,
            created_at=row.created_at,
        )
    return Complaint(
        id=row.id,
        event_id=row.event_id,
        user_id=row.user_id,
        issue_type=row.issue_type,
        description=row.description,
        status=row.status,
        created_at=row.created_at,
    )


def _to_notification(row: NotificationRow) -> Notification:
    return Notification(
        id=row.id,
        user_id=row.user_id,
        sender_id=row.sender_id,
        title=row.title,
        message=row.message,
        type=row.type,
        read=row.read,
        reference_id=row.reference_id,
        created_at=row.created_at,
    )


def stage_notification(db: Session, notification: Notification) -> None:
    """Add a notification and its outbox row to the session without committing."""
    db.add(NotificationRow(
        id=notification.id,
        user_id=notification.user_id,
        sender_id=notification.sender_id,
        title=notification.title,
        message=notification.message,
        type=notification.type,
        read=notification.read,
        reference_id=notification.reference_id,
        created_at=notification.created_at,
    ))
    db.add(NotificationOutbox(notification_id=notification.id, created_at=notification.created_at))


class SqlStore:
    """RequestStore + NotificationStore over a single SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _unit_of_work(self):
        try:
            yield self.db
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # --- requests ---------------------------------------------------------

    def get_event(self, event_id: str) -> Optional[EventSummary]:
        row = self.db.query(EventRow).filter(EventRow.id == event_id).first()
        if not row:
            return None
        return EventSummary(id=row.id, title=row.title, status=row.status)

    def get_request(self, kind: RequestKind, request_id: str) -> Optional[Request]:
        model = _ROWS[kind]
        row = self.db.query(model).filter(model.id == request_id).first()
        return _to_request(kind, row) if row else None

    def find_active_request(self, kind: RequestKind, user_id: str, event_id: str) -> Optional[Request]:
        model = _ROWS[kind]
        row = (
            self.db.query(model)
            .filter(
                model.user_id == user_id,
                model.event_id == event_id,
                model.status.in_(ACTIVE_STATUSES),
            )
            .first()
        )
        return _to_request(kind, row) if row else None

    def add_request(self, request: Request) -> Request:
        model = _ROWS[request.kind]
        fields = {
            "id": request.id,
            "event_id": request.event_id,
            "user_id": request.user_id,
            "status": request.status,
            "created_at": request.created_at,
        }
        if request.kind == RequestKind.mic_request:
            fields["reason"] = request.reason
        else:
            fields["issue_type"] = request.issue_type
            fields["description"] = request.description
        with self._unit_of_work() as db:
            db.add(model(**fields))
        return request

    def list_requests(
        self,
        kind: RequestKind,
        user_id: Optional[str] = None,
        event_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
    ) -> list[Request]:
        model = _ROWS[kind]
        query = self.db.query(model)
        if user_id:
            query = query.filter(model.user_id == user_id)
        if event_id:
            query = query.filter(model.event_id == event_id)
        if status:
            query = query.filter(model.status == status)
        return [_to_request(kind, row) for row in query.order_by(model.created_at.desc()).all()]

    def apply_transition(
        self,
        kind: RequestKind,
        request_id: str,
        expected: RequestStatus,
        new_status: RequestStatus,
        notification: Notification,
    ) -> Optional[Request]:
        model = _ROWS[kind]
        with self._unit_of_work() as db:
            updated = (
                db.query(model)
                .filter(model.id == request_id, model.status == expected)
                .update({model.status: new_status}, synchronize_session=False)
            )
            if updated == 0:
                logger.warning("%s %s is no longer %s; transition skipped", kind.value, request_id, expected.value)
                return None
            stage_notification(db, notification)
        self.db.expire_all()
        return self.get_request(kind, request_id)

    def profile_names(self, user_ids: Iterable[str]) -> dict[str, str]:
        ids = set(user_ids)
        if not ids:
            return {}
        rows = self.db.query(Profile.id, Profile.name).filter(Profile.id.in_(ids)).all()
        return {pid: name for pid, name in rows if name}

    def event_titles(self, event_ids: Iterable[str]) -> dict[str, str]:
        ids = set(event_ids)
        if not ids:
            return {}
        rows = self.db.query(EventRow.id, EventRow.title).filter(EventRow.id.in_(ids)).all()
        return dict(rows)

    # --- notifications ----------------------------------------------------

    def add_notifications(self, notifications: list[Notification]) -> list[Notification]:
        with self._unit_of_work() as db:
            for notification in notifications:
                stage_notification(db, notification)
        return notifications

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        row = self.db.query(NotificationRow).filter(NotificationRow.id == notification_id).first()
        return _to_notification(row) if row else None

    def list_notifications(self, user_id: str, limit: int) -> list[Notification]:
        rows = (
            self.db.query(NotificationRow)
            .filter(NotificationRow.user_id == user_id)
            .order_by(NotificationRow.created_at.desc())
            .limit(limit)
            .all()
        )
        return [_to_notification(row) for row in rows]

    def mark_read(self, notification_id: str) -> None:
        with self._unit_of_work() as db:
            db.query(NotificationRow).filter(
                NotificationRow.id == notification_id,
                NotificationRow.read.is_(False),
            ).update({NotificationRow.read: True}, synchronize_session=False)

    def mark_all_read(self, user_id: str) -> int:
        with self._unit_of_work() as db:
            flipped = db.query(NotificationRow).filter(
                NotificationRow.user_id == user_id,
                NotificationRow.read.is_(False),
            ).update({NotificationRow.read: True}, synchronize_session=False)
        return flipped

    def unread_count(self, user_id: str) -> int:
        return (
            self.db.query(NotificationRow)
            .filter(NotificationRow.user_id == user_id, NotificationRow.read.is_(False))
            .count()
        )

    def pending_outbox(self, limit: int, max_attempts: int) -> list[OutboxEntry]:
        rows = (
            self.db.query(NotificationOutbox)
            .filter(NotificationOutbox.delivered_at.is_(None), NotificationOutbox.attempts < max_attempts)
            .order_by(NotificationOutbox.id)
            .limit(limit)
            .all()
        )
        return [
            OutboxEntry(
                id=row.id,
                notification=_to_notification(row.notification),
                attempts=row.attempts,
                last_error=row.last_error,
            )
            for row in rows
        ]

    def mark_delivered(self, entry_id: int) -> None:
        with self._unit_of_work() as db:
            row = db.get(NotificationOutbox, entry_id)
            if row:
                row.attempts += 1
                row.delivered_at = utcnow()

    def record_failure(self, entry_id: int, error: str) -> None:
        with self._unit_of_work() as db:
            row = db.get(NotificationOutbox, entry_id)
            if row:
                row.attempts += 1
                row.last_error = error[:1000]
