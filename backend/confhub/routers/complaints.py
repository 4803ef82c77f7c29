"""Complaint API routes. Approve means acknowledged, deny means dismissed."""
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
from confhub.domain import ISSUE_TYPES, RequestKind, RequestStatus
from confhub.models.profile import Profile
from confhub.routers.mic_requests import parse_status_filter
from confhub.schemas.requests import ComplaintCreate, ComplaintOut
from confhub.services.delivery import DispatchReport
from confhub.services.request_lifecycle import RequestLifecycleController
from confhub.services.request_submission import RequestSubmissionService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/issue-types", response_model=list[str])
def list_issue_types():
    return list(ISSUE_TYPES)


@router.post("/", response_model=ComplaintOut, status_code=status.HTTP_201_CREATED)
def submit_complaint(
    payload: ComplaintCreate,
    profile: Profile = Depends(get_current_profile),
    service: RequestSubmissionService = Depends(get_submission_service),
):
    return service.submit_complaint(profile.id, payload.event_id, payload.issue_type, payload.description)


@router.get("/mine", response_model=list[ComplaintOut])
def my_complaints(
    profile: Profile = Depends(get_current_profile),
    service: RequestSubmissionService = Depends(get_submission_service),
):
    return service.list_requests(RequestKind.complaint, user_id=profile.id)


@router.get("/", response_model=list[ComplaintOut])
def list_complaints(
    status_filter: Optional[str] = Query(None, alias="status"),
    event_id: Optional[str] = Query(None),
    _: Profile = Depends(require_staff),
    service: RequestSubmissionService = Depends(get_submission_service),
):
    return service.list_requests(
        RequestKind.complaint, event_id=event_id, status=parse_status_filter(status_filter)
    )


@router.post("/{complaint_id}/approve", response_model=ComplaintOut)
def acknowledge_complaint(
    complaint_id: str,
    background_tasks: BackgroundTasks,
    actor: Profile = Depends(require_staff),
    controller: RequestLifecycleController = Depends(get_lifecycle_controller),
    dispatch_job: Callable[[], DispatchReport] = Depends(get_dispatch_job),
):
    result = controller.transition(RequestKind.complaint, complaint_id, RequestStatus.approved, actor.role, actor.id)
    background_tasks.add_task(dispatch_job)
    return result.request


@router.post("/{complaint_id}/deny", response_model=ComplaintOut)
def dismiss_complaint(
    complaint_id: str,
    background_tasks: BackgroundTasks,
    actor: Profile = Depends(require_staff),
    controller: RequestLifecycleController = Depends(get_lifecycle_controller),
    dispatch_job: Callable[[], DispatchReport] = Depends(get_dispatch_job),
):
    result = controller.transition(RequestKind.complaint, complaint_id, RequestStatus.denied, actor.role, actor.id)
    background_tasks.add_task(dispatch_job)
    return result.request
