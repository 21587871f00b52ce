from datetime import date, time

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from jobguide.core.security import generate_id
from jobguide.models.enums import InterviewStage, ScheduleType
from jobguide.models.student_schedule import StudentSchedule

UPDATABLE_FIELDS = (
    "date",
    "start_time",
    "end_time",
    "schedule_type",
    "title",
    "description",
    "location",
    "color",
    "application_id",
    "interview_stage",
)


def get_by_id(db: Session, schedule_id: str) -> StudentSchedule | None:
    return db.query(StudentSchedule).filter(StudentSchedule.id == schedule_id).first()


def find_overlapping(
    db: Session,
    student_id: str,
    day: date,
    start: time,
    end: time,
    exclude_id: str | None = None,
) -> list[StudentSchedule]:
    """Entries on ``day`` whose [start, end) intersects the given span, any type."""
    q = db.query(StudentSchedule).filter(
        StudentSchedule.student_id == student_id,
        StudentSchedule.date == day,
        StudentSchedule.start_time < end,
        StudentSchedule.end_time > start,
    )
    if exclude_id:
        q = q.filter(StudentSchedule.id != exclude_id)
    return q.order_by(StudentSchedule.start_time.asc()).all()


def list_range(db: Session, student_id: str, start_date: date, end_date: date) -> list[StudentSchedule]:
    return (
        db.query(StudentSchedule)
        .filter(
            StudentSchedule.student_id == student_id,
            StudentSchedule.date >= start_date,
            StudentSchedule.date <= end_date,
        )
        .order_by(StudentSchedule.date.asc(), StudentSchedule.start_time.asc())
        .all()
    )


def list_for_day(
    db: Session,
    student_id: str,
    day: date,
    types: tuple[ScheduleType, ...] | None = None,
) -> list[StudentSchedule]:
    q = db.query(StudentSchedule).filter(
        StudentSchedule.student_id == student_id,
        StudentSchedule.date == day,
    )
    if types:
        q = q.filter(StudentSchedule.schedule_type.in_(types))
    return q.order_by(StudentSchedule.start_time.asc()).all()


def find_mirror(
    db: Session,
    student_id: str,
    application_id: str,
    stage: InterviewStage,
) -> StudentSchedule | None:
    """Interview entry previously mirrored from an application stage.

    Rows written before the stage was stored are matched by their title suffix.
    """
    legacy = and_(
        StudentSchedule.interview_stage.is_(None),
        StudentSchedule.title.endswith(f" - {stage.label}面接"),
    )
    return (
        db.query(StudentSchedule)
        .filter(
            StudentSchedule.student_id == student_id,
            StudentSchedule.application_id == application_id,
            StudentSchedule.schedule_type == ScheduleType.INTERVIEW,
            or_(StudentSchedule.interview_stage == stage, legacy),
        )
        .order_by(StudentSchedule.interview_stage.is_(None))
        .first()
    )


def create(db: Session, student_id: str, fields: dict, *, commit: bool = True) -> StudentSchedule:
    entry = StudentSchedule(id=generate_id(), student_id=student_id)
    for key, value in fields.items():
        if key in UPDATABLE_FIELDS:
            setattr(entry, key, value)
    db.add(entry)
    if commit:
        db.commit()
        db.refresh(entry)
    else:
        db.flush()
    return entry


def update(db: Session, entry: StudentSchedule, fields: dict, *, commit: bool = True) -> StudentSchedule:
    for key, value in fields.items():
        if key in UPDATABLE_FIELDS:
            setattr(entry, key, value)
    if commit:
        db.commit()
        db.refresh(entry)
    else:
        db.flush()
    return entry


def delete(db: Session, entry: StudentSchedule) -> None:
    db.delete(entry)
    db.commit()
