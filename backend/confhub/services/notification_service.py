"""Per-user notification feed, read-state and announcements."""
import logging
from typing import Iterable, Optional, Union

from confhub.domain import STAFF_ROLES, Notification, NotificationType, Role
from confhub.errors import Forbidden, NotFound, ValidationError
from confhub.repositories.base import NotificationStore

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, store: NotificationStore, feed_limit: int = 50):
        self.store = store
        self.feed_limit = feed_limit

    def list_notifications(self, user_id: str, limit: Optional[int] = None) -> list[Notification]:
        return self.store.list_notifications(user_id, limit or self.feed_limit)

    def unread_count(self, user_id: str) -> int:
        return self.store.unread_count(user_id)

    def mark_as_read(self, notification_id: str, user_id: str) -> Notification:
        """Idempotent: an already-read notification is returned unchanged."""
        notification = self.store.get_notification(notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFound(f"Notification {notification_id} not found")
        if not notification.read:
            self.store.mark_read(notification_id)
            notification.read = True
        return notification

    def mark_all_as_read(self, user_id: str) -> int:
        flipped = self.store.mark_all_read(user_id)
        logger.info("Marked %d notifications read for user %s", flipped, user_id)
        return flipped

    def send_announcement(
        self,
        acting_role: Union[str, Role],
        sender_id: Optional[str],
        recipient_ids: Iterable[str],
        title: str,
        message: str,
        notification_type: NotificationType = NotificationType.announcement,
        reference_id: Optional[str] = None,
    ) -> list[Notification]:
        """Fan a message out as one notification per recipient."""
        if acting_role not in STAFF_ROLES:
            raise Forbidden("Only admins and organizers may send announcements")
        title = (title or "").strip()
        message = (message or "").strip()
        if not title or not message:
            raise ValidationError("title and message must not be empty")

        notifications = [
            Notification(
                user_id=uid,
                sender_id=sender_id,
                title=title,
                message=message,
                type=notification_type,
                reference_id=reference_id,
            )
            for uid in dict.fromkeys(recipient_ids)
        ]
        if notifications:
            self.store.add_notifications(notifications)
        logger.info("Announcement '%s' sent to %d users by %s", title, len(notifications), sender_id)
        return notifications
