"""Push delivery of notifications from the outbox (at-least-once).

A notification is visible in its recipient's feed as soon as the transaction
that created it commits. The dispatcher additionally pushes it through a
``DeliveryChannel`` (toast / realtime socket / webhook) and retries failed
pushes on later runs until ``max_attempts`` is reached.
"""
import logging
from dataclasses import dataclass
from typing import Protocol

from confhub.domain import Notification
from confhub.repositories.base import NotificationStore

logger = logging.getLogger(__name__)


class DeliveryChannel(Protocol):
    def deliver(self, notification: Notification) -> None:
        ...


class LoggingDeliveryChannel:
    """Default channel: records the push in the application log."""

    def deliver(self, notification: Notification) -> None:
        logger.info(
            "Push [%s] to user %s: %s", notification.type.value, notification.user_id, notification.title
        )


@dataclass
class DispatchReport:
    delivered: int = 0
    failed: int = 0


class NotificationDispatcher:
    def __init__(self, store: NotificationStore, channel: DeliveryChannel, max_attempts: int = 5, batch_size: int = 100):
        self.store = store
        self.channel = channel
        self.max_attempts = max_attempts
        self.batch_size = batch_size

    def dispatch_pending(self) -> DispatchReport:
        report = DispatchReport()
        for entry in self.store.pending_outbox(self.batch_size, self.max_attempts):
            try:
                self.channel.deliver(entry.notification)
            except Exception as exc:  # channel failures are retried on the next run
                report.failed += 1
                self.store.record_failure(entry.id, repr(exc))
                logger.warning(
                    "Delivery of notification %s failed (attempt %d/%d): %s",
                    entry.notification.id, entry.attempts + 1, self.max_attempts, exc,
                )
                continue
            self.store.mark_delivered(entry.id)
            report.delivered += 1
        if report.delivered or report.failed:
            logger.info("Outbox dispatch: %d delivered, %d failed", report.delivered, report.failed)
        return report
