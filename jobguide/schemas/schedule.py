import datetime as dt

from pydantic import BaseModel, Field

from jobguide.models.enums import ScheduleType


class ScheduleCreate(BaseModel):
    date: dt.date
    start_time: str = Field(description="HH:mm")
    end_time: str = Field(description="HH:mm")
    schedule_type: ScheduleType
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    location: str | None = None
    color: str | None = None
    application_id: str | None = None


class ScheduleUpdate(BaseModel):
    date: dt.date | None = None
    start_time: str | None = None
    end_time: str | None = None
    schedule_type: ScheduleType | None = None
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    location: str | None = None
    color: str | None = None


class ScheduleResponse(BaseModel):
    id: str
    date: dt.date
    start_time: str
    end_time: str
    schedule_type: ScheduleType
    title: str
    description: str | None = None
    location: str | None = None
    color: str
    application_id: str | None = None


class ConflictCheckResponse(BaseModel):
    has_conflict: bool
    conflicts: list[ScheduleResponse]


class TimeSlot(BaseModel):
    start_time: str
    end_time: str
