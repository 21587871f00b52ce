"""Mentoring availability and bookings.

Booking lifecycle: pending -> confirmed | rejected, confirmed -> completed |
cancelled. Only the booked instructor moves a booking. Confirming closes the
availability slot and cancelling reopens it. The double-booking pre-check
looks at the instructor's bookings only; it is independent of the student
calendar check in ``calendar_store``.
"""
import logging
from datetime import date, datetime, time

from sqlalchemy.orm import Session

from jobguide.core.session import UserSession
from jobguide.core.timeutils import display_zone, ensure_ordered, parse_time
from jobguide.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError, backend_errors
from jobguide.models.enums import BookingStatus
from jobguide.models.mentoring import InstructorAvailability, MentoringBooking
from jobguide.models.profile import Profile
from jobguide.repos import mentoring_repo, profile_repo

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[BookingStatus, tuple[BookingStatus, ...]] = {
    BookingStatus.PENDING: (BookingStatus.CONFIRMED, BookingStatus.REJECTED),
    BookingStatus.CONFIRMED: (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
    BookingStatus.COMPLETED: (),
    BookingStatus.CANCELLED: (),
    BookingStatus.REJECTED: (),
}

# Slot availability after a booking enters these states
SLOT_AVAILABILITY_AFTER = {
    BookingStatus.CONFIRMED: False,
    BookingStatus.CANCELLED: True,
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, ())


class MentoringService:
    def __init__(self, db: Session, session: UserSession):
        self.db = db
        self.session = session

    # --- instructors & availability ---------------------------------------

    def list_instructors(self) -> list[Profile]:
        with backend_errors(self.db, "list instructors"):
            return profile_repo.list_instructors(self.db)

    def _own_slot(self, availability_id: str) -> InstructorAvailability:
        self.session.require_instructor()
        with backend_errors(self.db, "get availability"):
            slot = mentoring_repo.get_availability(self.db, availability_id)
        if slot is None or slot.instructor_id != self.session.user_id:
            raise NotFoundError("指定された時間枠が見つかりません")
        return slot

    def create_availability(
        self,
        day: date,
        start_time: str | time,
        end_time: str | time,
        notes: str | None = None,
    ) -> InstructorAvailability:
        self.session.require_instructor()
        start, end = parse_time(start_time), parse_time(end_time)
        ensure_ordered(start, end)
        with backend_errors(self.db, "create availability"):
            if mentoring_repo.has_overlapping_availability(self.db, self.session.user_id, day, start, end):
                raise ConflictError("選択した時間帯は既に登録されています")
            slot = mentoring_repo.create_availability(
                self.db,
                self.session.user_id,
                {"date": day, "start_time": start, "end_time": end, "notes": notes},
            )
        logger.info("Availability created: instructor=%s date=%s %s-%s", self.session.user_id, day, start, end)
        return slot

    def update_availability(self, availability_id: str, fields: dict) -> InstructorAvailability:
        slot = self._own_slot(availability_id)
        data = dict(fields)
        for key in ("start_time", "end_time"):
            if data.get(key) is not None:
                data[key] = parse_time(data[key])
        start = data.get("start_time") or slot.start_time
        end = data.get("end_time") or slot.end_time
        ensure_ordered(start, end)
        with backend_errors(self.db, "update availability"):
            return mentoring_repo.update_availability(self.db, slot, data)

    def delete_availability(self, availability_id: str) -> None:
        slot = self._own_slot(availability_id)
        with backend_errors(self.db, "delete availability"):
            mentoring_repo.delete_availability(self.db, slot)

    def list_availability(self, instructor_id: str, start_date: date, end_date: date) -> list[InstructorAvailability]:
        with backend_errors(self.db, "list availability"):
            return mentoring_repo.list_availability(self.db, instructor_id, start_date, end_date)

    def open_slots(self, day: date, now: datetime | None = None) -> list[InstructorAvailability]:
        """Bookable slots for ``day``: none for past days, only future starts for today."""
        now = (now or datetime.now(display_zone())).astimezone(display_zone())
        today = now.date()
        if day < today:
            return []
        after = now.time().replace(second=0, microsecond=0) if day == today else None
        with backend_errors(self.db, "list open slots"):
            return mentoring_repo.list_open_slots(self.db, day, after)

    # --- bookings -----------------------------------------------------------

    def check_time_conflict(self, instructor_id: str, day: date, start: time, end: time) -> bool:
        with backend_errors(self.db, "check booking conflict"):
            return mentoring_repo.has_active_booking_overlap(self.db, instructor_id, day, start, end)

    def book(
        self,
        availability_id: str,
        subject: str,
        description: str | None = None,
        student_notes: str | None = None,
    ) -> MentoringBooking:
        if not (subject or "").strip():
            raise ValidationError("相談内容を入力してください")
        with backend_errors(self.db, "get availability"):
            slot = mentoring_repo.get_availability(self.db, availability_id)
        if slot is None or not slot.is_available:
            raise NotFoundError("指定された時間枠は予約できません")
        if self.check_time_conflict(slot.instructor_id, slot.date, slot.start_time, slot.end_time):
            raise ConflictError("この時間帯は既に予約されています")
        with backend_errors(self.db, "create booking"):
            booking = mentoring_repo.create_booking(
                self.db,
                self.session.user_id,
                slot,
                subject.strip(),
                description=description,
                student_notes=student_notes,
            )
        logger.info("Booking created: student=%s booking=%s slot=%s", self.session.user_id, booking.id, slot.id)
        return booking

    def list_my_bookings(self) -> list[MentoringBooking]:
        with backend_errors(self.db, "list bookings"):
            if self.session.is_instructor:
                return mentoring_repo.list_for_instructor(self.db, self.session.user_id)
            return mentoring_repo.list_for_student(self.db, self.session.user_id)

    def list_pending(self) -> list[MentoringBooking]:
        self.session.require_instructor()
        with backend_errors(self.db, "list pending bookings"):
            return mentoring_repo.list_for_instructor(self.db, self.session.user_id, BookingStatus.PENDING)

    def _transition(
        self,
        booking_id: str,
        target: BookingStatus,
        notes: str | None = None,
    ) -> MentoringBooking:
        self.session.require_instructor()
        with backend_errors(self.db, "get booking"):
            booking = mentoring_repo.get_booking(self.db, booking_id)
        if booking is None:
            raise NotFoundError("予約が見つかりません")
        if booking.instructor_id != self.session.user_id:
            raise PermissionDeniedError("他の指導者の予約は変更できません")
        if not can_transition(booking.status, target):
            raise ValidationError(f"「{booking.status.label}」の予約を「{target.label}」にはできません")

        with backend_errors(self.db, f"booking -> {target.value}"):
            if target in SLOT_AVAILABILITY_AFTER and booking.availability_id:
                slot = mentoring_repo.get_availability(self.db, booking.availability_id)
                if slot is not None:
                    slot.is_available = SLOT_AVAILABILITY_AFTER[target]
            mentoring_repo.set_status(self.db, booking, target, notes)
        logger.info("Booking %s: booking=%s instructor=%s", target.value, booking.id, self.session.user_id)
        return booking

    def confirm(self, booking_id: str) -> MentoringBooking:
        return self._transition(booking_id, BookingStatus.CONFIRMED)

    def reject(self, booking_id: str, reason: str | None = None) -> MentoringBooking:
        return self._transition(booking_id, BookingStatus.REJECTED, reason)

    def complete(self, booking_id: str, notes: str | None = None) -> MentoringBooking:
        return self._transition(booking_id, BookingStatus.COMPLETED, notes)

    def cancel(self, booking_id: str, reason: str | None = None) -> MentoringBooking:
        return self._transition(booking_id, BookingStatus.CANCELLED, reason)
