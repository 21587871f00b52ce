from sqlalchemy import Boolean, Column, String, Text, DateTime, JSON
from sqlalchemy.sql import func

from jobguide.database import Base


class Advertisement(Base):
    """Job advertisement shown on the dashboard, mostly filled by the scraper."""

    __tablename__ = "advertisements"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    image_url = Column(String)
    link_url = Column(String)
    company_name = Column(String)
    source = Column(String, index=True)
    location = Column(String)
    salary_range = Column(String)
    employment_type = Column(String)
    requirements = Column(Text)
    benefits = Column(JSON)
    is_active = Column(Boolean, nullable=False, default=True)
    posted_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
