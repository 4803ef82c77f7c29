"""Storage-independent records for the request / notification lifecycle.

The ORM models in ``confhub.models`` persist these; the stores in
``confhub.repositories`` hand them to the service layer so the lifecycle
controller never touches a SQLAlchemy session directly.
"""
import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import ClassVar, Optional, Union


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class Role(str, enum.Enum):
    admin = "admin"
    organizer = "organizer"
    attendee = "attendee"


class EventStatus(str, enum.Enum):
    upcoming = "upcoming"
    ongoing = "ongoing"
    completed = "completed"


class RequestKind(str, enum.Enum):
    mic_request = "mic_request"
    complaint = "complaint"


class RequestStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    denied = "denied"


class NotificationType(str, enum.Enum):
    mic_request = "mic_request"
    complaint = "complaint"
    announcement = "announcement"
    event_update = "event_update"


# Statuses that block a second submission for the same (user, event) pair.
ACTIVE_STATUSES = (RequestStatus.pending, RequestStatus.approved)
TERMINAL_STATUSES = (RequestStatus.approved, RequestStatus.denied)
STAFF_ROLES = (Role.admin, Role.organizer)

ISSUE_TYPES = ("Technical Problem", "Speaker Issue", "Venue Problem", "Other")


@dataclass
class EventSummary:
    id: str
    title: str
    status: EventStatus = EventStatus.upcoming


@dataclass
class MicRequest:
    event_id: str
    user_id: str
    reason: str
    status: RequestStatus = RequestStatus.pending
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    requester_name: Optional[str] = None
    event_title: Optional[str] = None

    kind: ClassVar[RequestKind] = RequestKind.mic_request


@dataclass
class Complaint:
    event_id: str
    user_id: str
    issue_type: str
    description: str
    status: RequestStatus = RequestStatus.pending
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    requester_name: Optional[str] = None
    event_title: Optional[str] = None

    kind: ClassVar[RequestKind] = RequestKind.complaint


Request = Union[MicRequest, Complaint]


@dataclass
class Notification:
    user_id: str
    title: str
    message: str
    type: NotificationType
    reference_id: Optional[str] = None
    sender_id: Optional[str] = None
    read: bool = False
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class OutboxEntry:
    """A notification waiting for push delivery."""

    id: int
    notification: Notification
    attempts: int = 0
    last_error: Optional[str] = None
    delivered_at: Optional[datetime] = None
