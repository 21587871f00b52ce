import datetime as dt

from pydantic import BaseModel, Field

from jobguide.models.enums import BookingStatus


class InstructorResponse(BaseModel):
    id: str
    full_name: str | None = None
    email: str
    university: str | None = None
    major: str | None = None
    bio: str | None = None
    avatar_url: str | None = None

    class Config:
        from_attributes = True


class AvailabilityCreate(BaseModel):
    date: dt.date
    start_time: str
    end_time: str
    notes: str | None = None


class AvailabilityUpdate(BaseModel):
    date: dt.date | None = None
    start_time: str | None = None
    end_time: str | None = None
    is_available: bool | None = None
    notes: str | None = None


class AvailabilityResponse(BaseModel):
    id: str
    instructor_id: str
    date: dt.date
    start_time: str
    end_time: str
    is_available: bool
    notes: str | None = None


class BookingCreate(BaseModel):
    availability_id: str
    subject: str = Field(max_length=200)
    description: str | None = None
    student_notes: str | None = None


class BookingNote(BaseModel):
    reason: str | None = Field(default=None, max_length=2000)


class BookingResponse(BaseModel):
    id: str
    student_id: str
    instructor_id: str
    availability_id: str | None = None
    date: dt.date
    start_time: str
    end_time: str
    subject: str
    description: str | None = None
    student_notes: str | None = None
    instructor_notes: str | None = None
    status: BookingStatus
    created_at: dt.datetime | None = None
