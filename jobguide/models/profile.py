from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from jobguide.database import Base
from jobguide.models.enums import UserRole, enum_column_type


class Profile(Base):
    """Public profile row keyed by the identity provider's user id."""

    __tablename__ = "profiles"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, nullable=False, index=True)
    full_name = Column(String)
    role = Column(enum_column_type(UserRole), nullable=False, default=UserRole.STUDENT)
    age = Column(Integer)
    university = Column(String)
    major = Column(String)
    graduation_year = Column(Integer)
    bio = Column(Text)
    avatar_url = Column(String)
    resume_url = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
