from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from jobguide.core.session import UserSession
from jobguide.core.timeutils import format_time, parse_time
from jobguide.database import get_db
from jobguide.dependencies import get_current_session
from jobguide.models.enums import ScheduleType
from jobguide.models.student_schedule import StudentSchedule
from jobguide.schemas.schedule import (
    ConflictCheckResponse,
    ScheduleCreate,
    ScheduleResponse,
    ScheduleUpdate,
    TimeSlot,
)
from jobguide.services.calendar_store import CalendarStore, blocking_conflicts

router = APIRouter(prefix="/schedule", tags=["schedule"])


def schedule_to_response(entry: StudentSchedule) -> ScheduleResponse:
    return ScheduleResponse(
        id=entry.id,
        date=entry.date,
        start_time=format_time(entry.start_time),
        end_time=format_time(entry.end_time),
        schedule_type=entry.schedule_type,
        title=entry.title,
        description=entry.description,
        location=entry.location,
        color=entry.color,
        application_id=entry.application_id,
    )


@router.get("", response_model=list[ScheduleResponse])
def list_schedule(
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    entries = CalendarStore(db, session).list_by_range(start_date, end_date)
    return [schedule_to_response(e) for e in entries]


@router.post("", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
def create_schedule(
    data: ScheduleCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    entry = CalendarStore(db, session).upsert(data.model_dump())
    return schedule_to_response(entry)


@router.patch("/{schedule_id}", response_model=ScheduleResponse)
def update_schedule(
    schedule_id: str,
    data: ScheduleUpdate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    entry = CalendarStore(db, session).upsert(data.model_dump(exclude_unset=True), schedule_id)
    return schedule_to_response(entry)


@router.delete("/{schedule_id}")
def delete_schedule(
    schedule_id: str,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    CalendarStore(db, session).delete(schedule_id)
    return {"deleted": True}


@router.get("/conflicts", response_model=ConflictCheckResponse)
def check_conflicts(
    date: date,
    start_time: str,
    end_time: str,
    schedule_type: ScheduleType = ScheduleType.BUSY,
    exclude_id: str | None = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Probe used by the form before saving; ``conflicts`` lists only the entries that would block."""
    overlapping = CalendarStore(db, session).check_conflict(
        date, parse_time(start_time), parse_time(end_time), exclude_id=exclude_id
    )
    conflicts = blocking_conflicts(overlapping, schedule_type)
    return ConflictCheckResponse(
        has_conflict=bool(conflicts),
        conflicts=[schedule_to_response(e) for e in conflicts],
    )


@router.get("/available-slots", response_model=list[TimeSlot])
def available_slots(
    date: date,
    min_duration: int = Query(default=60, ge=1, le=24 * 60),
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    slots = CalendarStore(db, session).available_slots(date, min_duration)
    return [TimeSlot(start_time=format_time(s), end_time=format_time(e)) for s, e in slots]
