from datetime import datetime

from pydantic import BaseModel, Field

from jobguide.models.enums import ApplicationStatus
from jobguide.schemas.schedule import ScheduleResponse


class ApplicationCreate(BaseModel):
    company_name: str = Field(max_length=200)
    position: str = Field(max_length=200)


class ApplicationUpdate(BaseModel):
    """Direct edit; only fields present in the request body are written."""

    company_name: str | None = Field(default=None, max_length=200)
    position: str | None = Field(default=None, max_length=200)
    status: ApplicationStatus | None = None
    applied_at: datetime | None = None  # wall-clock (Asia/Tokyo) when naive


class InterviewSet(BaseModel):
    start: datetime
    end: datetime | None = None


class OfferDateSet(BaseModel):
    received_at: datetime | None = None


class ApplicationResponse(BaseModel):
    id: str
    company_name: str
    position: str
    status: ApplicationStatus
    status_label: str
    applied_at: datetime | None = None
    first_interview_at: datetime | None = None
    first_interview_end: datetime | None = None
    second_interview_at: datetime | None = None
    second_interview_end: datetime | None = None
    final_interview_at: datetime | None = None
    final_interview_end: datetime | None = None
    offer_received_at: datetime | None = None


class InterviewSetResponse(ApplicationResponse):
    """Application after an interview change, with its mirrored calendar entry."""

    schedule: ScheduleResponse


class ApplicationCounts(BaseModel):
    total: int
    rejected: int
    offered: int
    in_progress: int


class ApplicationDetailsIn(BaseModel):
    annual_salary: int | None = Field(default=None, ge=0)
    monthly_salary: int | None = Field(default=None, ge=0)
    benefits: list[str] | None = None
    location: str | None = None
    work_hours: str | None = None
    other_conditions: str | None = None


class ApplicationDetailsResponse(BaseModel):
    id: str
    application_id: str
    annual_salary: int | None = None
    monthly_salary: int | None = None
    benefits: list[str] | None = None
    location: str | None = None
    work_hours: str | None = None
    other_conditions: str | None = None

    class Config:
        from_attributes = True
