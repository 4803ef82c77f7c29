"""Store interfaces the lifecycle services are written against.

``SqlStore`` implements them on top of a SQLAlchemy session; ``InMemoryStore``
is the fake used by the controller tests.
"""
from typing import Iterable, Optional, Protocol

from confhub.domain import (
    EventSummary,
    Notification,
    OutboxEntry,
    Request,
    RequestKind,
    RequestStatus,
)


class RequestStore(Protocol):
    def get_event(self, event_id: str) -> Optional[EventSummary]:
        ...

    def get_request(self, kind: RequestKind, request_id: str) -> Optional[Request]:
        ...

    def find_active_request(self, kind: RequestKind, user_id: str, event_id: str) -> Optional[Request]:
        """Return a pending or approved request for the (user, event) pair, if any."""
        ...

    def add_request(self, request: Request) -> Request:
        ...

    def list_requests(
        self,
        kind: RequestKind,
        user_id: Optional[str] = None,
        event_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
    ) -> list[Request]:
        """Newest first."""
        ...

    def apply_transition(
        self,
        kind: RequestKind,
        request_id: str,
        expected: RequestStatus,
        new_status: RequestStatus,
        notification: Notification,
    ) -> Optional[Request]:
        """Compare-and-set the status and enqueue the notification in one unit.

        Returns the updated request, or ``None`` when the stored status no
        longer equals ``expected`` (nothing is written in that case).
        """
        ...

    def profile_names(self, user_ids: Iterable[str]) -> dict[str, str]:
        ...

    def event_titles(self, event_ids: Iterable[str]) -> dict[str, str]:
        ...


class NotificationStore(Protocol):
    def add_notifications(self, notifications: list[Notification]) -> list[Notification]:
        ...

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        ...

    def list_notifications(self, user_id: str, limit: int) -> list[Notification]:
        """Newest first."""
        ...

    def mark_read(self, notification_id: str) -> None:
        ...

    def mark_all_read(self, user_id: str) -> int:
        """Return how many notifications flipped to read."""
        ...

    def unread_count(self, user_id: str) -> int:
        ...

    def pending_outbox(self, limit: int, max_attempts: int) -> list[OutboxEntry]:
        ...

    def mark_delivered(self, entry_id: int) -> None:
        ...

    def record_failure(self, entry_id: int, error: str) -> None:
        ...
