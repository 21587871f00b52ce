"""
Give an existing profile the instructor role.
Usage: python -m jobguide.scripts.promote_instructor user@example.com [--revoke]
"""
import sys

from sqlalchemy import func

from jobguide.database import SessionLocal, ensure_tables_exist
from jobguide.models.enums import UserRole
from jobguide.models.profile import Profile
from jobguide.repos.profile_repo import set_role


def main():
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    if not args:
        print("Usage: python -m jobguide.scripts.promote_instructor <email> [--revoke]")
        sys.exit(1)
    email = args[0].strip().lower()
    role = UserRole.STUDENT if "--revoke" in sys.argv else UserRole.INSTRUCTOR
    ensure_tables_exist()
    db = SessionLocal()
    try:
        profile = db.query(Profile).filter(func.lower(Profile.email) == email).first()
        if not profile:
            print(f"Profile not found: {email}")
            sys.exit(1)
        set_role(db, profile, role)
        print(f"Set role of {email} to {role.value}.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
