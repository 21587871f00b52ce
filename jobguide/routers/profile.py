import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from jobguide.core.session import UserSession
from jobguide.database import get_db
from jobguide.dependencies import get_current_session
from jobguide.repos.profile_repo import create as create_profile, get_by_id, update as update_profile
from jobguide.schemas.profile import ProfileResponse, ProfileUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=ProfileResponse)
def get_me(
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Profile of the signed-in user, created from the token on first access."""
    profile = get_by_id(db, session.user_id)
    if profile is None:
        if not session.email:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
        profile = create_profile(db, session.user_id, session.email, role=session.role)
        logger.info("Profile created on first access: user=%s role=%s", session.user_id, session.role.value)
    return profile


@router.patch("/me", response_model=ProfileResponse)
def update_me(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    profile = get_by_id(db, session.user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    profile = update_profile(db, profile, data.model_dump(exclude_unset=True))
    logger.info("Profile updated: user=%s", session.user_id)
    return profile
