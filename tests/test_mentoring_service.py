from datetime import date, datetime, time
from zoneinfo import ZoneInfo

import pytest

from jobguide.core.session import UserSession
from jobguide.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from jobguide.models.enums import BookingStatus, UserRole
from jobguide.services.mentoring_service import MentoringService, can_transition

DAY = date(2030, 4, 10)
JST = ZoneInfo("Asia/Tokyo")


@pytest.fixture
def other_student() -> UserSession:
    return UserSession(user_id="student-2")


@pytest.fixture
def slot(db_session, instructor):
    return MentoringService(db_session, instructor).create_availability(DAY, "10:00", "11:00", notes="CV review")


def test_transition_table():
    assert can_transition(BookingStatus.PENDING, BookingStatus.CONFIRMED)
    assert can_transition(BookingStatus.PENDING, BookingStatus.REJECTED)
    assert can_transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED)
    assert can_transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED)
    assert not can_transition(BookingStatus.PENDING, BookingStatus.COMPLETED)
    assert not can_transition(BookingStatus.REJECTED, BookingStatus.CONFIRMED)
    assert not can_transition(BookingStatus.COMPLETED, BookingStatus.CANCELLED)


def test_only_instructors_manage_availability(db_session, student):
    with pytest.raises(PermissionDeniedError):
        MentoringService(db_session, student).create_availability(DAY, "10:00", "11:00")


def test_overlapping_availability_is_rejected(db_session, instructor, slot):
    service = MentoringService(db_session, instructor)
    with pytest.raises(ConflictError):
        service.create_availability(DAY, "10:30", "11:30")
    service.create_availability(DAY, "11:00", "12:00")
    assert len(service.list_availability(instructor.user_id, DAY, DAY)) == 2


def test_booking_precheck_blocks_active_overlap(db_session, student, other_student, slot):
    booking = MentoringService(db_session, student).book(slot.id, "面接練習")
    assert booking.status == BookingStatus.PENDING
    assert booking.instructor_id == slot.instructor_id
    assert (booking.date, booking.start_time, booking.end_time) == (DAY, time(10), time(11))

    with pytest.raises(ConflictError):
        MentoringService(db_session, other_student).book(slot.id, "ES添削")


def test_booking_allowed_when_only_inactive_bookings_overlap(db_session, instructor, student, other_student, slot):
    first = MentoringService(db_session, student).book(slot.id, "面接練習")
    MentoringService(db_session, instructor).reject(first.id, "都合がつきません")

    again = MentoringService(db_session, other_student).book(slot.id, "ES添削")
    assert again.status == BookingStatus.PENDING

    instructor_service = MentoringService(db_session, instructor)
    instructor_service.confirm(again.id)
    instructor_service.cancel(again.id, "急用のため")
    db_session.refresh(slot)
    assert slot.is_available is True

    third = MentoringService(db_session, student).book(slot.id, "再予約")
    assert third.status == BookingStatus.PENDING


def test_booking_requires_subject_and_open_slot(db_session, student, slot):
    service = MentoringService(db_session, student)
    with pytest.raises(ValidationError):
        service.book(slot.id, "  ")
    with pytest.raises(NotFoundError):
        service.book("missing", "topic")


def test_confirm_closes_slot_and_complete(db_session, instructor, student, other_student, slot):
    booking = MentoringService(db_session, student).book(slot.id, "面接練習")
    service = MentoringService(db_session, instructor)

    confirmed = service.confirm(booking.id)
    assert confirmed.status == BookingStatus.CONFIRMED
    db_session.refresh(slot)
    assert slot.is_available is False
    with pytest.raises(NotFoundError):
        MentoringService(db_session, other_student).book(slot.id, "ES添削")

    done = service.complete(booking.id, "Good progress")
    assert done.status == BookingStatus.COMPLETED
    assert done.instructor_notes == "Good progress"
    with pytest.raises(ValidationError, match="「完了」の予約を「キャンセル」にはできません"):
        service.cancel(booking.id)
    db_session.refresh(slot)
    assert slot.is_available is False


def test_transitions_are_instructor_only_and_owned(db_session, instructor, student, slot):
    booking = MentoringService(db_session, student).book(slot.id, "面接練習")
    with pytest.raises(PermissionDeniedError):
        MentoringService(db_session, student).confirm(booking.id)

    stranger = UserSession(user_id="instructor-2", role=UserRole.INSTRUCTOR)
    with pytest.raises(PermissionDeniedError):
        MentoringService(db_session, stranger).confirm(booking.id)
    with pytest.raises(NotFoundError):
        MentoringService(db_session, instructor).confirm("missing")


def test_pending_and_my_bookings(db_session, instructor, student, slot):
    MentoringService(db_session, student).book(slot.id, "面接練習")
    assert len(MentoringService(db_session, instructor).list_pending()) == 1
    assert len(MentoringService(db_session, instructor).list_my_bookings()) == 1
    assert len(MentoringService(db_session, student).list_my_bookings()) == 1
    with pytest.raises(PermissionDeniedError):
        MentoringService(db_session, student).list_pending()


def test_open_slots_hide_past_days_and_started_slots(db_session, instructor, student):
    service = MentoringService(db_session, instructor)
    service.create_availability(DAY, "09:00", "10:00")
    service.create_availability(DAY, "15:00", "16:00")

    viewer = MentoringService(db_session, student)
    assert len(viewer.open_slots(DAY, now=datetime(2030, 4, 9, 12, 0, tzinfo=JST))) == 2
    today = viewer.open_slots(DAY, now=datetime(2030, 4, 10, 12, 0, tzinfo=JST))
    assert [s.start_time for s in today] == [time(15)]
    assert viewer.open_slots(DAY, now=datetime(2030, 4, 11, 8, 0, tzinfo=JST)) == []


def test_update_and_delete_own_availability(db_session, instructor, slot):
    service = MentoringService(db_session, instructor)
    updated = service.update_availability(slot.id, {"end_time": "11:30", "notes": "extended"})
    assert updated.end_time == time(11, 30)
    with pytest.raises(ValidationError):
        service.update_availability(slot.id, {"start_time": "12:00"})

    stranger = UserSession(user_id="instructor-2", role=UserRole.INSTRUCTOR)
    with pytest.raises(NotFoundError):
        MentoringService(db_session, stranger).delete_availability(slot.id)
    service.delete_availability(slot.id)
    assert service.list_availability(instructor.user_id, DAY, DAY) == []
