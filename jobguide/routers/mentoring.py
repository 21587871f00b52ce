from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobguide.core.session import UserSession
from jobguide.core.timeutils import format_time
from jobguide.database import get_db
from jobguide.dependencies import get_current_instructor, get_current_session
from jobguide.models.mentoring import InstructorAvailability, MentoringBooking
from jobguide.schemas.mentoring import (
    AvailabilityCreate,
    AvailabilityResponse,
    AvailabilityUpdate,
    BookingCreate,
    BookingNote,
    BookingResponse,
    InstructorResponse,
)
from jobguide.services.mentoring_service import MentoringService

router = APIRouter(prefix="/mentoring", tags=["mentoring"])


def _slot_to_response(slot: InstructorAvailability) -> AvailabilityResponse:
    return AvailabilityResponse(
        id=slot.id,
        instructor_id=slot.instructor_id,
        date=slot.date,
        start_time=format_time(slot.start_time),
        end_time=format_time(slot.end_time),
        is_available=slot.is_available,
        notes=slot.notes,
    )


def _booking_to_response(b: MentoringBooking) -> BookingResponse:
    return BookingResponse(
        id=b.id,
        student_id=b.student_id,
        instructor_id=b.instructor_id,
        availability_id=b.availability_id,
        date=b.date,
        start_time=format_time(b.start_time),
        end_time=format_time(b.end_time),
        subject=b.subject,
        description=b.description,
        student_notes=b.student_notes,
        instructor_notes=b.instructor_notes,
        status=b.status,
        created_at=b.created_at,
    )


@router.get("/instructors", response_model=list[InstructorResponse])
def list_instructors(
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    return MentoringService(db, session).list_instructors()


@router.get("/instructors/{instructor_id}/availability", response_model=list[AvailabilityResponse])
def instructor_availability(
    instructor_id: str,
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    slots = MentoringService(db, session).list_availability(instructor_id, start_date, end_date)
    return [_slot_to_response(s) for s in slots]


@router.get("/slots", response_model=list[AvailabilityResponse])
def open_slots(
    day: date,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Bookable slots of every instructor for one day."""
    return [_slot_to_response(s) for s in MentoringService(db, session).open_slots(day)]


@router.post("/availability", response_model=AvailabilityResponse, status_code=status.HTTP_201_CREATED)
def create_availability(
    data: AvailabilityCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_instructor),
):
    slot = MentoringService(db, session).create_availability(data.date, data.start_time, data.end_time, data.notes)
    return _slot_to_response(slot)


@router.patch("/availability/{availability_id}", response_model=AvailabilityResponse)
def update_availability(
    availability_id: str,
    data: AvailabilityUpdate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_instructor),
):
    slot = MentoringService(db, session).update_availability(availability_id, data.model_dump(exclude_unset=True))
    return _slot_to_response(slot)


@router.delete("/availability/{availability_id}")
def delete_availability(
    availability_id: str,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_instructor),
):
    MentoringService(db, session).delete_availability(availability_id)
    return {"deleted": True}


@router.post("/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    booking = MentoringService(db, session).book(
        data.availability_id,
        data.subject,
        description=data.description,
        student_notes=data.student_notes,
    )
    return _booking_to_response(booking)


@router.get("/bookings", response_model=list[BookingResponse])
def my_bookings(
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Student: own bookings. Instructor: bookings made with them."""
    return [_booking_to_response(b) for b in MentoringService(db, session).list_my_bookings()]


@router.get("/bookings/pending", response_model=list[BookingResponse])
def pending_bookings(
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_instructor),
):
    return [_booking_to_response(b) for b in MentoringService(db, session).list_pending()]


@router.post("/bookings/{booking_id}/confirm", response_model=BookingResponse)
def confirm_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_instructor),
):
    return _booking_to_response(MentoringService(db, session).confirm(booking_id))


@router.post("/bookings/{booking_id}/reject", response_model=BookingResponse)
def reject_booking(
    booking_id: str,
    data: BookingNote | None = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_instructor),
):
    reason = data.reason if data else None
    return _booking_to_response(MentoringService(db, session).reject(booking_id, reason))


@router.post("/bookings/{booking_id}/complete", response_model=BookingResponse)
def complete_booking(
    booking_id: str,
    data: BookingNote | None = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_instructor),
):
    notes = data.reason if data else None
    return _booking_to_response(MentoringService(db, session).complete(booking_id, notes))


@router.post("/bookings/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    booking_id: str,
    data: BookingNote | None = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_instructor),
):
    reason = data.reason if data else None
    return _booking_to_response(MentoringService(db, session).cancel(booking_id, reason))
