import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from jobguide.database import get_db
from jobguide.core.security import decode_access_token
from jobguide.core.session import UserSession
from jobguide.models.enums import UserRole
from jobguide.repos.profile_repo import get_by_id

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


def _role_from_claims(claims: dict) -> UserRole:
    raw = (claims.get("user_metadata") or {}).get("role")
    try:
        return UserRole(raw) if raw else UserRole.STUDENT
    except ValueError:
        logger.info("Ignoring unknown role claim %r", raw)
        return UserRole.STUDENT


def get_current_session(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> UserSession:
    """Build the per-request session from the identity provider's bearer token.

    The role stored on the profile wins over the token's metadata claim.
    """
    if not credentials:
        logger.info("Auth failed: missing bearer credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    claims = decode_access_token(credentials.credentials)
    if not claims:
        logger.info("Auth failed: invalid or expired token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    user_id = claims["sub"]
    profile = get_by_id(db, user_id)
    if profile is not None:
        return UserSession(user_id=user_id, role=profile.role, email=profile.email)
    return UserSession(user_id=user_id, role=_role_from_claims(claims), email=claims.get("email"))


def get_current_instructor(
    session: UserSession = Depends(get_current_session),
) -> UserSession:
    """Require a session whose role is instructor."""
    if not session.is_instructor:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Instructor access required",
        )
    return session
