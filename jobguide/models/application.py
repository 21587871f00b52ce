from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from jobguide.database import Base
from jobguide.models.enums import ApplicationStatus, enum_column_type


class Application(Base):
    """One recruitment process with a company, plus its interview milestones."""

    __tablename__ = "applications"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    company_name = Column(String, nullable=False)
    position = Column(String, nullable=False)
    status = Column(
        enum_column_type(ApplicationStatus),
        nullable=False,
        default=ApplicationStatus.DOCUMENT_SCREENING,
    )
    applied_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    first_interview_at = Column(DateTime(timezone=True))
    first_interview_end = Column(DateTime(timezone=True))
    second_interview_at = Column(DateTime(timezone=True))
    second_interview_end = Column(DateTime(timezone=True))
    final_interview_at = Column(DateTime(timezone=True))
    final_interview_end = Column(DateTime(timezone=True))
    offer_received_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    details = relationship(
        "ApplicationDetails",
        back_populates="application",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ApplicationDetails(Base):
    """Offer terms, at most one row per application."""

    __tablename__ = "application_details"

    id = Column(String, primary_key=True, index=True)
    application_id = Column(
        String,
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    annual_salary = Column(Integer)
    monthly_salary = Column(Integer)
    benefits = Column(JSON, default=list)
    location = Column(String)
    work_hours = Column(String)
    other_conditions = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    application = relationship("Application", back_populates="details")
