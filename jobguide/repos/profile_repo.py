from sqlalchemy.orm import Session

from jobguide.models.enums import UserRole
from jobguide.models.profile import Profile

EDITABLE_FIELDS = (
    "full_name",
    "age",
    "university",
    "major",
    "graduation_year",
    "bio",
    "avatar_url",
    "resume_url",
)


def get_by_id(db: Session, user_id: str) -> Profile | None:
    return db.query(Profile).filter(Profile.id == user_id).first()


def create(
    db: Session,
    user_id: str,
    email: str,
    role: UserRole = UserRole.STUDENT,
    full_name: str | None = None,
) -> Profile:
    profile = Profile(id=user_id, email=email, role=role, full_name=full_name)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def update(db: Session, profile: Profile, fields: dict) -> Profile:
    """Apply editable fields only; role and email are owned by sign-up."""
    for key, value in fields.items():
        if key in EDITABLE_FIELDS:
            setattr(profile, key, value)
    db.commit()
    db.refresh(profile)
    return profile


def list_instructors(db: Session) -> list[Profile]:
    return (
        db.query(Profile)
        .filter(Profile.role == UserRole.INSTRUCTOR)
        .order_by(Profile.full_name.asc())
        .all()
    )


def set_role(db: Session, profile: Profile, role: UserRole) -> Profile:
    profile.role = role
    db.commit()
    db.refresh(profile)
    return profile
