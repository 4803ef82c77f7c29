"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from confhub.config import settings
from confhub.database import Base, engine
from confhub.errors import ConferenceError

# Import routers
from confhub.routers import profiles, events, mic_requests, complaints, notifications, feedback, dashboard

# Import all models so Base.metadata knows about them
from confhub.models.profile import Profile                                  # noqa: F401
from confhub.models.event import Event, EventSpeaker                        # noqa: F401
from confhub.models.attendee import EventAttendee                           # noqa: F401
from confhub.models.mic_request import MicRequest                           # noqa: F401
from confhub.models.complaint import Complaint                              # noqa: F401
from confhub.models.notification import Notification, NotificationOutbox    # noqa: F401
from confhub.models.feedback import Feedback                                # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Conference Hub",
    description="Conference management backend: events, mic requests, complaints and notifications",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ConferenceError)
def handle_conference_error(request: Request, exc: ConferenceError):
    """Render domain errors as JSON; the failed operation has committed nothing."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "error": exc.kind})


# Register routers
app.include_router(profiles.router, prefix="/api/profiles", tags=["Profiles"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(mic_requests.router, prefix="/api/mic-requests", tags=["MicRequests"])
app.include_router(complaints.router, prefix="/api/complaints", tags=["Complaints"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(feedback.router, prefix="/api/feedback", tags=["Feedback"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
