from datetime import date, time

from sqlalchemy.orm import Session

from jobguide.core.security import generate_id
from jobguide.models.enums import ACTIVE_BOOKING_STATUSES, BookingStatus
from jobguide.models.mentoring import InstructorAvailability, MentoringBooking

AVAILABILITY_FIELDS = ("date", "start_time", "end_time", "is_available", "notes")


# --- availability ---------------------------------------------------------


def get_availability(db: Session, availability_id: str) -> InstructorAvailability | None:
    return db.query(InstructorAvailability).filter(InstructorAvailability.id == availability_id).first()


def list_availability(
    db: Session,
    instructor_id: str,
    start_date: date,
    end_date: date,
) -> list[InstructorAvailability]:
    return (
        db.query(InstructorAvailability)
        .filter(
            InstructorAvailability.instructor_id == instructor_id,
            InstructorAvailability.date >= start_date,
            InstructorAvailability.date <= end_date,
            InstructorAvailability.is_available.is_(True),
        )
        .order_by(InstructorAvailability.date.asc(), InstructorAvailability.start_time.asc())
        .all()
    )


def list_open_slots(db: Session, day: date, after: time | None = None) -> list[InstructorAvailability]:
    """Available slots of every instructor on ``day``, optionally only those starting after ``after``."""
    q = db.query(InstructorAvailability).filter(
        InstructorAvailability.date == day,
        InstructorAvailability.is_available.is_(True),
    )
    if after is not None:
        q = q.filter(InstructorAvailability.start_time > after)
    return q.order_by(InstructorAvailability.start_time.asc()).all()


def has_overlapping_availability(
    db: Session,
    instructor_id: str,
    day: date,
    start: time,
    end: time,
    exclude_id: str | None = None,
) -> bool:
    q = db.query(InstructorAvailability.id).filter(
        InstructorAvailability.instructor_id == instructor_id,
        InstructorAvailability.date == day,
        InstructorAvailability.is_available.is_(True),
        InstructorAvailability.start_time < end,
        InstructorAvailability.end_time > start,
    )
    if exclude_id:
        q = q.filter(InstructorAvailability.id != exclude_id)
    return q.first() is not None


def create_availability(db: Session, instructor_id: str, fields: dict) -> InstructorAvailability:
    slot = InstructorAvailability(id=generate_id(), instructor_id=instructor_id, is_available=True)
    for key, value in fields.items():
        if key in AVAILABILITY_FIELDS:
            setattr(slot, key, value)
    db.add(slot)
    db.commit()
    db.refresh(slot)
    return slot


def update_availability(db: Session, slot: InstructorAvailability, fields: dict) -> InstructorAvailability:
    for key, value in fields.items():
        if key in AVAILABILITY_FIELDS:
            setattr(slot, key, value)
    db.commit()
    db.refresh(slot)
    return slot


def delete_availability(db: Session, slot: InstructorAvailability) -> None:
    db.delete(slot)
    db.commit()


# --- bookings -------------------------------------------------------------


def get_booking(db: Session, booking_id: str) -> MentoringBooking | None:
    return db.query(MentoringBooking).filter(MentoringBooking.id == booking_id).first()


def has_active_booking_overlap(
    db: Session,
    instructor_id: str,
    day: date,
    start: time,
    end: time,
) -> bool:
    """True when a pending or confirmed booking of the instructor intersects the span."""
    row = (
        db.query(MentoringBooking.id)
        .filter(
            MentoringBooking.instructor_id == instructor_id,
            MentoringBooking.date == day,
            MentoringBooking.status.in_(ACTIVE_BOOKING_STATUSES),
            MentoringBooking.start_time < end,
            MentoringBooking.end_time > start,
        )
        .first()
    )
    return row is not None


def create_booking(
    db: Session,
    student_id: str,
    slot: InstructorAvailability,
    subject: str,
    description: str | None = None,
    student_notes: str | None = None,
) -> MentoringBooking:
    booking = MentoringBooking(
        id=generate_id(),
        student_id=student_id,
        instructor_id=slot.instructor_id,
        availability_id=slot.id,
        date=slot.date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        subject=subject,
        description=description,
        student_notes=student_notes,
        status=BookingStatus.PENDING,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


def list_for_student(db: Session, student_id: str) -> list[MentoringBooking]:
    return (
        db.query(MentoringBooking)
        .filter(MentoringBooking.student_id == student_id)
        .order_by(MentoringBooking.date.asc(), MentoringBooking.start_time.asc())
        .all()
    )


def list_for_instructor(
    db: Session,
    instructor_id: str,
    status: BookingStatus | None = None,
) -> list[MentoringBooking]:
    q = db.query(MentoringBooking).filter(MentoringBooking.instructor_id == instructor_id)
    if status is not None:
        q = q.filter(MentoringBooking.status == status)
        if status == BookingStatus.PENDING:
            return q.order_by(MentoringBooking.created_at.asc()).all()
    return q.order_by(MentoringBooking.date.asc(), MentoringBooking.start_time.asc()).all()


def set_status(
    db: Session,
    booking: MentoringBooking,
    status: BookingStatus,
    instructor_notes: str | None = None,
    *,
    commit: bool = True,
) -> MentoringBooking:
    booking.status = status
    if instructor_notes:
        booking.instructor_notes = instructor_notes
    if commit:
        db.commit()
        db.refresh(booking)
    else:
        db.flush()
    return booking
