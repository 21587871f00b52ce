from sqlalchemy import Boolean, Column, String, Text, Date, Time, DateTime, ForeignKey, DDL, event
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from jobguide.database import Base
from jobguide.models.enums import BookingStatus, enum_column_type
from jobguide.models.student_schedule import ENABLE_BTREE_GIST

BOOKING_NO_OVERLAP = (
    "ALTER TABLE mentoring_bookings ADD CONSTRAINT mentoring_bookings_no_overlap "
    "EXCLUDE USING gist (instructor_id WITH =, "
    "tsrange(date + start_time, date + end_time, '[)') WITH &&) "
    "WHERE (status IN ('pending', 'confirmed'))"
)


class InstructorAvailability(Base):
    """A slot an instructor opens for mentoring."""

    __tablename__ = "instructor_availability"

    id = Column(String, primary_key=True, index=True)
    instructor_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    bookings = relationship("MentoringBooking", back_populates="availability")


class MentoringBooking(Base):
    """A student's reservation of an availability slot."""

    __tablename__ = "mentoring_bookings"

    id = Column(String, primary_key=True, index=True)
    student_id = Column(String, nullable=False, index=True)
    instructor_id = Column(String, nullable=False, index=True)
    availability_id = Column(
        String,
        ForeignKey("instructor_availability.id", ondelete="SET NULL"),
        nullable=True,
    )
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    subject = Column(String, nullable=False)
    description = Column(Text)
    student_notes = Column(Text)
    instructor_notes = Column(Text)
    status = Column(enum_column_type(BookingStatus), nullable=False, default=BookingStatus.PENDING)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    availability = relationship("InstructorAvailability", back_populates="bookings")


event.listen(
    MentoringBooking.__table__,
    "before_create",
    DDL(ENABLE_BTREE_GIST).execute_if(dialect="postgresql"),
)
event.listen(
    MentoringBooking.__table__,
    "after_create",
    DDL(BOOKING_NO_OVERLAP).execute_if(dialect="postgresql"),
)
