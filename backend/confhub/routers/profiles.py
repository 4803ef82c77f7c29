"""Profile API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from confhub.database import get_db
from confhub.dependencies import get_current_profile, require_admin, require_staff
from confhub.domain import Role
from confhub.errors import Conflict, NotFound, ValidationError
from confhub.models.profile import Profile
from confhub.schemas.profile import ProfileCreate, ProfileRoleUpdate, ProfileOut

logger = logging.getLogger(__name__)
router = APIRouter()


def _parse_role(value: str) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError(f"Invalid role: {value}")


@router.post("/", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
def create_profile(payload: ProfileCreate, db: Session = Depends(get_db)):
    """Sync a profile from the auth provider. New profiles always start as attendees
    unless this is the first profile, which becomes the admin."""
    if payload.id and db.query(Profile).filter(Profile.id == payload.id).first():
        raise Conflict("Profile already exists")
    if payload.email and db.query(Profile).filter(Profile.email == payload.email).first():
        raise Conflict("Email is already registered")

    requested = _parse_role(payload.role)
    role = Role.admin if db.query(Profile).count() == 0 else Role.attendee
    if requested != role:
        logger.info("Ignoring requested role %s for new profile; assigned %s", requested.value, role.value)

    profile = Profile(email=payload.email, name=payload.name, role=role)
    if payload.id:
        profile.id = payload.id
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("Created profile %s (%s) as %s", profile.id, profile.name, profile.role.value)
    return profile


@router.get("/me", response_model=ProfileOut)
def get_me(profile: Profile = Depends(get_current_profile)):
    return profile


@router.get("/", response_model=list[ProfileOut])
def list_profiles(db: Session = Depends(get_db), _: Profile = Depends(require_staff)):
    """List all profiles (staff only)."""
    return db.query(Profile).order_by(Profile.created_at).all()


@router.get("/{profile_id}", response_model=ProfileOut)
def get_profile(profile_id: str, db: Session = Depends(get_db), _: Profile = Depends(require_staff)):
    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if not profile:
        raise NotFound("Profile not found")
    return profile


@router.patch("/{profile_id}/role", response_model=ProfileOut)
def update_role(
    profile_id: str,
    payload: ProfileRoleUpdate,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    """Promote or demote a profile (admin only)."""
    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if not profile:
        raise NotFound("Profile not found")
    profile.role = _parse_role(payload.role)
    db.commit()
    db.refresh(profile)
    logger.info("Admin %s set role of %s to %s", admin.id, profile_id, profile.role.value)
    return profile
