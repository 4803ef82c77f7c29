"""FastAPI dependencies: session identity, role gates and service wiring.

The upstream auth provider authenticates the caller and forwards its id in
the ``X-User-Id`` header. Roles are always read from the ``profiles`` table;
nothing the client sends can elevate them.
"""
from typing import Callable, Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session, sessionmaker

from confhub.config import settings
from confhub.database import get_db, get_session_factory
from confhub.domain import Role
from confhub.errors import Forbidden, Unauthorized
from confhub.models.profile import Profile
from confhub.repositories.sql import SqlStore
from confhub.services.delivery import (
    DeliveryChannel,
    DispatchReport,
    LoggingDeliveryChannel,
    NotificationDispatcher,
)
from confhub.services.notification_service import NotificationService
from confhub.services.request_lifecycle import RequestLifecycleController
from confhub.services.request_submission import RequestSubmissionService


def get_current_profile(
    x_user_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Profile:
    if not x_user_id:
        raise Unauthorized("Missing X-User-Id header")
    profile = db.query(Profile).filter(Profile.id == x_user_id).first()
    if not profile:
        raise Unauthorized("Unknown user")
    return profile


def require_roles(*roles: Role):
    """Build a dependency that admits only profiles holding one of ``roles``."""

    def _dependency(profile: Profile = Depends(get_current_profile)) -> Profile:
        if profile.role not in roles:
            raise Forbidden(f"Requires one of: {', '.join(r.value for r in roles)}")
        return profile

    return _dependency


require_staff = require_roles(Role.admin, Role.organizer)
require_admin = require_roles(Role.admin)


def get_store(db: Session = Depends(get_db)) -> SqlStore:
    return SqlStore(db)


def get_lifecycle_controller(store: SqlStore = Depends(get_store)) -> RequestLifecycleController:
    return RequestLifecycleController(store)


def get_submission_service(store: SqlStore = Depends(get_store)) -> RequestSubmissionService:
    return RequestSubmissionService(store)


def get_notification_service(store: SqlStore = Depends(get_store)) -> NotificationService:
    return NotificationService(store, feed_limit=settings.NOTIFICATION_FEED_LIMIT)


def get_delivery_channel() -> DeliveryChannel:
    return LoggingDeliveryChannel()


def _build_dispatcher(store: SqlStore, channel: DeliveryChannel) -> NotificationDispatcher:
    return NotificationDispatcher(
        store,
        channel,
        max_attempts=settings.OUTBOX_MAX_ATTEMPTS,
        batch_size=settings.OUTBOX_BATCH_SIZE,
    )


def get_dispatcher(
    store: SqlStore = Depends(get_store),
    channel: DeliveryChannel = Depends(get_delivery_channel),
) -> NotificationDispatcher:
    return _build_dispatcher(store, channel)


def get_dispatch_job(
    session_factory: sessionmaker = Depends(get_session_factory),
    channel: DeliveryChannel = Depends(get_delivery_channel),
) -> Callable[[], DispatchReport]:
    """Outbox drain for ``BackgroundTasks``; it opens and closes its own session."""

    def _dispatch() -> DispatchReport:
        db = session_factory()
        try:
            return _build_dispatcher(SqlStore(db), channel).dispatch_pending()
        finally:
            db.close()

    return _dispatch
