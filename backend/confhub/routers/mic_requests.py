"""Mic request API routes: attendee submission and staff decisions."""
import logging
from typing import Callable, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from confhub.dependencies import (
    get_current_profile,
    get_dispatch_job,
    get_lifecycle_controller,
    get_submission_service,
    require_staff,
)
from confhub.domain import RequestKind, RequestStatus
from confhub.errors import ValidationError
from confhub.models.profile import Profile
from confhub.schemas.requests import MicRequestCreate, MicRequestOut
from confhub.services.delivery import DispatchReport
from confhub.services.request_lifecycle import RequestLifecycleController
from confhub.services.request_submission import RequestSubmissionService

logger = logging.getLogger(__name__)
router = APIRouter()


def parse_status_filter(value: Optional[str]) -> Optional[RequestStatus]:
    if value is None or value == "all":
        return None
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid status filter: {value}")


@router.post("/", response_model=MicRequestOut, status_code=status.HTTP_201_CREATED)
def submit_mic_request(
    payload: MicRequestCreate,
    profile: Profile = Depends(get_current_profile),
    service: RequestSubmissionService = Depends(get_submission_service),
):
    """Ask for the microphone at an event. One active request per event."""
    return service.submit_mic_request(profile.id, payload.event_id, payload.reason)


@router.get("/mine", response_model=list[MicRequestOut])
def my_mic_requests(
    profile: Profile = Depends(get_current_profile),
    service: RequestSubmissionService = Depends(get_submission_service),
):
    return service.list_requests(RequestKind.mic_request, user_id=profile.id)


@router.get("/", response_model=list[MicRequestOut])
def list_mic_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    event_id: Optional[str] = Query(None),
    _: Profile = Depends(require_staff),
    service: RequestSubmissionService = Depends(get_submission_service),
):
    """All mic requests, newest first (staff only)."""
    return service.list_requests(
        RequestKind.mic_request, event_id=event_id, status=parse_status_filter(status_filter)
    )


def _decide(request_id, target, actor, controller, dispatch_job, background_tasks):
    result = controller.transition(RequestKind.mic_request, request_id, target, actor.role, actor.id)
    background_tasks.add_task(dispatch_job)
    return result.request


@router.post("/{request_id}/approve", response_model=MicRequestOut)
def approve_mic_request(
    request_id: str,
    background_tasks: BackgroundTasks,
    actor: Profile = Depends(require_staff),
    controller: RequestLifecycleController = Depends(get_lifecycle_controller),
    dispatch_job: Callable[[], DispatchReport] = Depends(get_dispatch_job),
):
    return _decide(request_id, RequestStatus.approved, actor, controller, dispatch_job, background_tasks)


@router.post("/{request_id}/deny", response_model=MicRequestOut)
def deny_mic_request(
    request_id: str,
    background_tasks: BackgroundTasks,
    actor: Profile = Depends(require_staff),
    controller: RequestLifecycleController = Depends(get_lifecycle_controller),
    dispatch_job: Callable[[], DispatchReport] = Depends(get_dispatch_job),
):
    return _decide(request_id, RequestStatus.denied, actor, controller, dispatch_job, background_tasks)
