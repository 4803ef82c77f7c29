"""In-memory implementation of the request and notification stores."""
import threading
from dataclasses import replace
from itertools import count
from typing import Iterable, Optional

from confhub.domain import (
    ACTIVE_STATUSES,
    EventSummary,
    Notification,
    OutboxEntry,
    Request,
    RequestKind,
    RequestStatus,
    utcnow,
)


class InMemoryStore:
    """Dict-backed store; every mutation runs under one lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._ids = count(1)
        self.events: dict[str, EventSummary] = {}
        self.profiles: dict[str, str] = {}
        self.requests: dict[RequestKind, list[Request]] = {kind: [] for kind in RequestKind}
        self.notifications: list[Notification] = []
        self.outbox: list[OutboxEntry] = []

    # --- seeding ----------------------------------------------------------

    def add_event(self, event: EventSummary) -> EventSummary:
        self.events[event.id] = event
        return event

    def add_profile(self, user_id: str, name: str) -> None:
        self.profiles[user_id] = name

    # --- requests ---------------------------------------------------------

    def get_event(self, event_id: str) -> Optional[EventSummary]:
        return self.events.get(event_id)

    def get_request(self, kind: RequestKind, request_id: str) -> Optional[Request]:
        for request in self.requests[kind]:
            if request.id == request_id:
                return replace(request)
        return None

    def find_active_request(self, kind: RequestKind, user_id: str, event_id: str) -> Optional[Request]:
        for request in self.requests[kind]:
            if request.user_id == user_id and request.event_id == event_id and request.status in ACTIVE_STATUSES:
                return replace(request)
        return None

    def add_request(self, request: Request) -> Request:
        with self._lock:
            self.requests[request.kind].insert(0, replace(request))
        return request

    def list_requests(
        self,
        kind: RequestKind,
        user_id: Optional[str] = None,
        event_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
    ) -> list[Request]:
        return [
            replace(r)
            for r in self.requests[kind]
            if (user_id is None or r.user_id == user_id)
            and (event_id is None or r.event_id == event_id)
            and (status is None or r.status == status)
        ]

    def apply_transition(
        self,
        kind: RequestKind,
        request_id: str,
        expected: RequestStatus,
        new_status: RequestStatus,
        notification: Notification,
    ) -> Optional[Request]:
        with self._lock:
            for request in self.requests[kind]:
                if request.id != request_id:
                    continue
                if request.status != expected:
                    return None
                request.status = new_status
                self._stage(notification)
                return replace(request)
        return None

    def profile_names(self, user_ids: Iterable[str]) -> dict[str, str]:
        return {uid: self.profiles[uid] for uid in user_ids if uid in self.profiles}

    def event_titles(self, event_ids: Iterable[str]) -> dict[str, str]:
        return {eid: self.events[eid].title for eid in event_ids if eid in self.events}

    # --- notifications ----------------------------------------------------

    def _stage(self, notification: Notification) -> None:
        self.notifications.insert(0, replace(notification))
        self.outbox.append(OutboxEntry(id=next(self._ids), notification=replace(notification)))

    def add_notifications(self, notifications: list[Notification]) -> list[Notification]:
        with self._lock:
            for notification in notifications:
                self._stage(notification)
        return notifications

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        for notification in self.notifications:
            if notification.id == notification_id:
                return replace(notification)
        return None

    def list_notifications(self, user_id: str, limit: int) -> list[Notification]:
        return [replace(n) for n in self.notifications if n.user_id == user_id][:limit]

    def mark_read(self, notification_id: str) -> None:
        with self._lock:
            for notification in self.notifications:
                if notification.id == notification_id:
                    notification.read = True

    def mark_all_read(self, user_id: str) -> int:
        flipped = 0
        with self._lock:
            for notification in self.notifications:
                if notification.user_id == user_id and not notification.read:
                    notification.read = True
                    flipped += 1
        return flipped

    def unread_count(self, user_id: str) -> int:
        return sum(1 for n in self.notifications if n.user_id == user_id and not n.read)

    def pending_outbox(self, limit: int, max_attempts: int) -> list[OutboxEntry]:
        pending = [e for e in self.outbox if e.delivered_at is None and e.attempts < max_attempts]
        return [replace(e) for e in pending[:limit]]

    def mark_delivered(self, entry_id: int) -> None:
        with self._lock:
            for entry in self.outbox:
                if entry.id == entry_id:
                    entry.attempts += 1
                    entry.delivered_at = utcnow()

    def record_failure(self, entry_id: int, error: str) -> None:
        with self._lock:
            for entry in self.outbox:
                if entry.id == entry_id:
                    entry.attempts += 1
                    entry.last_error = error
