"""Request lifecycle controller: approve / deny mic requests and complaints.

Responsibilities:
- Authorization: only admins and organizers may decide a request
- Monotonic status: pending -> approved | denied, terminal afterwards
- Compare-and-set on the stored status so concurrent deciders cannot both win
- Exactly one notification per transition, addressed to the requester,
  written in the same unit of work as the status change
"""
import logging
from dataclasses import dataclass
from typing import Optional, Union

from confhub.domain import (
    STAFF_ROLES,
    TERMINAL_STATUSES,
    Notification,
    NotificationType,
    Request,
    RequestKind,
    RequestStatus,
    Role,
)
from confhub.errors import Forbidden, InvalidTransition, NotFound, ValidationError
from confhub.repositories.base import RequestStore

logger = logging.getLogger(__name__)

EVENT_TITLE_FALLBACK = "the event"


@dataclass
class TransitionResult:
    request: Request
    notification: Notification


def build_transition_notification(
    request: Request,
    status: RequestStatus,
    event_title: str,
    sender_id: Optional[str] = None,
) -> Notification:
    """Render the requester-facing notification for a decided request."""
    approved = status == RequestStatus.approved
    if request.kind == RequestKind.mic_request:
        title = f"Mic Request {'Approved' if approved else 'Denied'}"
        message = f'Your mic request for "{event_title}" has been {status.value}.'
        notification_type = NotificationType.mic_request
    else:
        title = f"Complaint {'Acknowledged' if approved else 'Dismissed'}"
        outcome = "acknowledged and will be addressed" if approved else "dismissed"
        message = f'Your complaint about "{event_title}" has been {outcome}.'
        notification_type = NotificationType.complaint

    return Notification(
        user_id=request.user_id,
        title=title,
        message=message,
        type=notification_type,
        reference_id=request.id,
        sender_id=sender_id,
    )


def _parse_target(target_status: Union[str, RequestStatus]) -> RequestStatus:
    try:
        status = RequestStatus(target_status)
    except ValueError:
        raise ValidationError(f"Unknown request status: {target_status}")
    if status not in TERMINAL_STATUSES:
        raise ValidationError("A request can only be transitioned to 'approved' or 'denied'")
    return status


def _parse_role(acting_role: Union[str, Role, None]) -> Optional[Role]:
    try:
        return Role(acting_role)
    except ValueError:
        return None


class RequestLifecycleController:
    """Applies status transitions through an injected store."""

    def __init__(self, store: RequestStore):
        self.store = store

    def transition(
        self,
        kind: Union[str, RequestKind],
        request_id: str,
        target_status: Union[str, RequestStatus],
        acting_role: Union[str, Role],
        acting_user_id: Optional[str] = None,
    ) -> TransitionResult:
        kind = RequestKind(kind)
        status = _parse_target(target_status)

        if _parse_role(acting_role) not in STAFF_ROLES:
            logger.warning("Role %s tried to %s %s %s", acting_role, status.value, kind.value, request_id)
            raise Forbidden("Only admins and organizers may decide requests")

        request = self.store.get_request(kind, request_id)
        if request is None:
            raise NotFound(f"{kind.value} {request_id} not found")
        if request.status != RequestStatus.pending:
            raise InvalidTransition(f"{kind.value} {request_id} is already {request.status.value}")

        event = self.store.get_event(request.event_id)
        event_title = event.title if event else EVENT_TITLE_FALLBACK
        notification = build_transition_notification(request, status, event_title, acting_user_id)

        updated = self.store.apply_transition(kind, request_id, RequestStatus.pending, status, notification)
        if updated is None:
            # Another session decided the request between our read and write.
            raise InvalidTransition(f"{kind.value} {request_id} was decided concurrently")

        logger.info(
            "%s %s %s by %s; notified user %s",
            kind.value, request_id, status.value, acting_user_id or acting_role, request.user_id,
        )
        return TransitionResult(request=updated, notification=notification)
