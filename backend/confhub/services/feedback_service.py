"""Feedback submission and the organizer-facing summary."""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from confhub.errors import ValidationError
from confhub.models.feedback import Feedback
from confhub.services.event_service import get_event

logger = logging.getLogger(__name__)


def submit_feedback(
    db: Session,
    user_id: str,
    rating: int,
    comment: Optional[str] = None,
    event_id: Optional[str] = None,
) -> Feedback:
    if not 1 <= rating <= 5:
        raise ValidationError("rating must be between 1 and 5")
    if event_id:
        get_event(db, event_id)

    feedback = Feedback(user_id=user_id, event_id=event_id, rating=rating, comment=(comment or "").strip() or None)
    db.add(feedback)
    db.commit()
    db.refresh(feedback)
    logger.info("Feedback %s (%d stars) from user %s", feedback.id, rating, user_id)
    return feedback


def summarize(db: Session, event_id: Optional[str] = None, latest: int = 5) -> dict[str, Any]:
    """Rating distribution (1..5), percentages, average and the latest entries."""
    query = db.query(Feedback)
    if event_id:
        query = query.filter(Feedback.event_id == event_id)
    entries = query.order_by(Feedback.created_at.desc()).all()

    counts = [0] * 5
    for entry in entries:
        counts[entry.rating - 1] += 1
    total = len(entries)

    return {
        "total": total,
        "average": round(sum(e.rating for e in entries) / total, 2) if total else None,
        "distribution": counts,
        "percentages": [round(c * 100 / total) if total else 0 for c in counts],
        "latest": entries[:latest],
    }
