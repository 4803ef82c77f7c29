"""Attendee-side submission and listing of mic requests and complaints."""
import logging
from typing import Optional, Union

from confhub.domain import (
    ISSUE_TYPES,
    Complaint,
    EventStatus,
    MicRequest,
    Request,
    RequestKind,
    RequestStatus,
)
from confhub.errors import DuplicateRequest, NotFound, ValidationError
from confhub.repositories.base import RequestStore

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown User"
UNKNOWN_EVENT = "Unknown Event"


def _require_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} must not be empty")
    return text


class RequestSubmissionService:
    def __init__(self, store: RequestStore):
        self.store = store

    def _check_event_and_duplicates(self, kind: RequestKind, user_id: str, event_id: str) -> None:
        event = self.store.get_event(event_id)
        if event is None:
            raise NotFound(f"Event {event_id} not found")
        if event.status == EventStatus.completed:
            raise ValidationError(f"Event '{event.title}' is completed and no longer accepts requests")
        if self.store.find_active_request(kind, user_id, event_id):
            raise DuplicateRequest("You already have an active request for this event")

    def submit_mic_request(self, user_id: str, event_id: str, reason: Optional[str]) -> MicRequest:
        reason = _require_text(reason, "reason")
        self._check_event_and_duplicates(RequestKind.mic_request, user_id, event_id)

        request = self.store.add_request(MicRequest(event_id=event_id, user_id=user_id, reason=reason))
        logger.info("MicRequest %s submitted for event %s by user %s", request.id, event_id, user_id)
        return request

    def submit_complaint(
        self,
        user_id: str,
        event_id: str,
        issue_type: Optional[str],
        description: Optional[str],
    ) -> Complaint:
        if issue_type not in ISSUE_TYPES:
            raise ValidationError(f"issue_type must be one of: {', '.join(ISSUE_TYPES)}")
        description = _require_text(description, "description")
        self._check_event_and_duplicates(RequestKind.complaint, user_id, event_id)

        complaint = self.store.add_request(
            Complaint(event_id=event_id, user_id=user_id, issue_type=issue_type, description=description)
        )
        logger.info("Complaint %s (%s) submitted for event %s by user %s", complaint.id, issue_type, event_id, user_id)
        return complaint

    def list_requests(
        self,
        kind: Union[str, RequestKind],
        user_id: Optional[str] = None,
        event_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
    ) -> list[Request]:
        """List requests newest first, with requester name and event title filled in."""
        requests = self.store.list_requests(RequestKind(kind), user_id=user_id, event_id=event_id, status=status)
        names = self.store.profile_names(r.user_id for r in requests)
        titles = self.store.event_titles(r.event_id for r in requests)
        for request in requests:
            request.requester_name = names.get(request.user_id, UNKNOWN_USER)
            request.event_title = titles.get(request.event_id, UNKNOWN_EVENT)
        return requests
