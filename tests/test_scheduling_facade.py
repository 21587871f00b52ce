from datetime import date, datetime, time

import pytest

from jobguide.errors import ConflictError
from jobguide.models.enums import ApplicationStatus, InterviewStage, ScheduleType
from jobguide.services.application_store import ApplicationStore
from jobguide.services.calendar_store import CalendarStore
from jobguide.services.scheduling_facade import SchedulingFacade, mirror_title

JUNE_1 = date(2024, 6, 1)


def _naive(value: datetime) -> datetime:
    return value.replace(tzinfo=None)


def test_acme_interview_lifecycle(db_session, student):
    store = ApplicationStore(db_session, student)
    facade = SchedulingFacade(db_session, student)
    calendar = CalendarStore(db_session, student)

    app = store.create("Acme Corp", "Engineer")
    assert app.status == ApplicationStatus.DOCUMENT_SCREENING

    app, entry = facade.set_interview(app.id, InterviewStage.FIRST, datetime(2024, 6, 1, 10, 0))
    assert app.status == ApplicationStatus.FIRST_INTERVIEW_WAITING
    assert _naive(app.first_interview_at) == datetime(2024, 6, 1, 1, 0)
    assert entry.schedule_type == ScheduleType.INTERVIEW
    assert entry.date == JUNE_1
    assert (entry.start_time, entry.end_time) == (time(10, 0), time(11, 0))
    assert "Acme Corp" in entry.title
    assert entry.application_id == app.id

    app = facade.clear_interview(app.id, InterviewStage.FIRST)
    assert app.status == ApplicationStatus.DOCUMENT_SCREENING
    assert app.first_interview_at is None
    # the mirrored entry stays on the calendar
    assert [e.id for e in calendar.list_by_range(JUNE_1, JUNE_1)] == [entry.id]


def test_setting_again_moves_the_same_mirror(db_session, student):
    facade = SchedulingFacade(db_session, student)
    app = ApplicationStore(db_session, student).create("Acme Corp", "Engineer")

    _, first = facade.set_interview(app.id, InterviewStage.SECOND, datetime(2024, 6, 1, 10, 0))
    _, moved = facade.set_interview(
        app.id, InterviewStage.SECOND, datetime(2024, 6, 1, 13, 0), datetime(2024, 6, 1, 14, 30)
    )
    assert moved.id == first.id
    assert (moved.start_time, moved.end_time) == (time(13, 0), time(14, 30))
    assert moved.title == mirror_title("Acme Corp", InterviewStage.SECOND)
    assert len(CalendarStore(db_session, student).list_by_range(JUNE_1, JUNE_1)) == 1


def test_calendar_conflict_rolls_back_application_change(db_session, student):
    store = ApplicationStore(db_session, student)
    CalendarStore(db_session, student).upsert(
        {
            "date": JUNE_1,
            "start_time": "10:30",
            "end_time": "12:00",
            "schedule_type": "class",
            "title": "Lecture",
        }
    )
    app = store.create("Acme Corp", "Engineer")

    with pytest.raises(ConflictError):
        SchedulingFacade(db_session, student).set_interview(app.id, InterviewStage.FIRST, datetime(2024, 6, 1, 10, 0))

    db_session.expire_all()
    reloaded = store.get(app.id)
    assert reloaded.status == ApplicationStatus.DOCUMENT_SCREENING
    assert reloaded.first_interview_at is None
    assert len(CalendarStore(db_session, student).list_by_range(JUNE_1, JUNE_1)) == 1


def test_offer_date_only_touches_timestamp(db_session, student):
    facade = SchedulingFacade(db_session, student)
    app = ApplicationStore(db_session, student).create("Acme Corp", "Engineer")

    app = facade.set_offer_date(app.id, datetime(2024, 7, 1, 9, 0))
    assert _naive(app.offer_received_at) == datetime(2024, 7, 1, 0, 0)
    assert app.status == ApplicationStatus.DOCUMENT_SCREENING

    app = facade.set_offer_date(app.id, None)
    assert app.offer_received_at is None


def test_reschedule_after_company_rename_moves_the_same_mirror(db_session, student):
    store = ApplicationStore(db_session, student)
    facade = SchedulingFacade(db_session, student)
    app = store.create("Acme Corp", "Engineer")

    _, first = facade.set_interview(app.id, InterviewStage.FIRST, datetime(2024, 6, 1, 10, 0))
    store.update(app.id, {"company_name": "Acme Inc"})

    _, moved = facade.set_interview(app.id, InterviewStage.FIRST, datetime(2024, 6, 1, 10, 30))
    assert moved.id == first.id
    assert moved.start_time == time(10, 30)
    assert moved.title == mirror_title("Acme Inc", InterviewStage.FIRST)
    assert moved.interview_stage == InterviewStage.FIRST
    assert len(CalendarStore(db_session, student).list_by_range(JUNE_1, JUNE_1)) == 1


def test_each_stage_keeps_its_own_mirror(db_session, student):
    facade = SchedulingFacade(db_session, student)
    app = ApplicationStore(db_session, student).create("Acme Corp", "Engineer")

    _, first = facade.set_interview(app.id, InterviewStage.FIRST, datetime(2024, 6, 1, 10, 0))
    _, second = facade.set_interview(app.id, InterviewStage.SECOND, datetime(2024, 6, 1, 15, 0))
    assert first.id != second.id
    assert len(CalendarStore(db_session, student).list_by_range(JUNE_1, JUNE_1)) == 2


def test_mirror_without_stored_stage_is_found_by_title(db_session, student):
    facade = SchedulingFacade(db_session, student)
    app = ApplicationStore(db_session, student).create("Acme Corp", "Engineer")
    legacy = CalendarStore(db_session, student).upsert(
        {
            "date": JUNE_1,
            "start_time": "10:00",
            "end_time": "11:00",
            "schedule_type": "interview",
            "title": mirror_title("Acme Corp", InterviewStage.FINAL),
            "application_id": app.id,
        }
    )
    assert legacy.interview_stage is None

    _, moved = facade.set_interview(app.id, InterviewStage.FINAL, datetime(2024, 6, 1, 10, 30))
    assert moved.id == legacy.id
    assert moved.interview_stage == InterviewStage.FINAL
