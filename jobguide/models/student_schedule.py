from sqlalchemy import Column, String, Text, Date, Time, DateTime, ForeignKey, DDL, event
from sqlalchemy.sql import func

from jobguide.database import Base
from jobguide.models.enums import InterviewStage, ScheduleType, enum_column_type

# Storage-level double-booking guard. Free entries never occupy time.
ENABLE_BTREE_GIST = "CREATE EXTENSION IF NOT EXISTS btree_gist"
SCHEDULE_NO_OVERLAP = (
    "ALTER TABLE student_schedule ADD CONSTRAINT student_schedule_no_overlap "
    "EXCLUDE USING gist (student_id WITH =, "
    "tsrange(date + start_time, date + end_time, '[)') WITH &&) "
    "WHERE (schedule_type <> 'free')"
)


class StudentSchedule(Base):
    """A block on a student's personal calendar (wall-clock times, no zone)."""

    __tablename__ = "student_schedule"

    id = Column(String, primary_key=True, index=True)
    student_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    schedule_type = Column(enum_column_type(ScheduleType), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text)
    location = Column(String)
    color = Column(String, nullable=False)
    application_id = Column(String, ForeignKey("applications.id", ondelete="SET NULL"), nullable=True)
    # Set only on entries mirrored from an application interview stage
    interview_stage = Column(enum_column_type(InterviewStage), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


event.listen(
    StudentSchedule.__table__,
    "before_create",
    DDL(ENABLE_BTREE_GIST).execute_if(dialect="postgresql"),
)
event.listen(
    StudentSchedule.__table__,
    "after_create",
    DDL(SCHEDULE_NO_OVERLAP).execute_if(dialect="postgresql"),
)
