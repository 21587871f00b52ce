from datetime import datetime, timedelta, timezone
from uuid import uuid4

from jose import JWTError, jwt

from jobguide.config import settings


def _decode_options() -> dict:
    return {"verify_aud": bool(settings.jwt_audience)}


def create_access_token(subject: str, role: str | None = None, email: str | None = None) -> str:
    """Mint a token shaped like the identity provider's. Used by scripts and tests."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode = {"sub": subject, "exp": expire}
    if settings.jwt_audience:
        to_encode["aud"] = settings.jwt_audience
    if email:
        to_encode["email"] = email
    if role:
        to_encode["user_metadata"] = {"role": role}
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Return the verified claims, or None when the token is invalid or expired."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience or None,
            options=_decode_options(),
        )
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload


def generate_id() -> str:
    return str(uuid4())
