from datetime import date, time

import pytest

from jobguide.errors import ConflictError, NotFoundError, ValidationError
from jobguide.models.enums import ScheduleType
from jobguide.services.application_store import ApplicationStore
from jobguide.services.calendar_store import CalendarStore, blocking_conflicts, compute_available_slots

DAY = date(2024, 6, 3)


class _Entry:
    def __init__(self, schedule_type):
        self.schedule_type = schedule_type


def _entry(start, end, schedule_type="busy", title="block", day=DAY):
    return {
        "date": day,
        "start_time": start,
        "end_time": end,
        "schedule_type": schedule_type,
        "title": title,
    }


def test_compute_available_slots_between_busy_blocks():
    busy = [(time(10), time(11)), (time(14), time(15))]
    slots = compute_available_slots(busy, time(9), time(18), 60)
    assert slots == [(time(9), time(10)), (time(11), time(14)), (time(15), time(18))]


def test_compute_available_slots_drops_short_gaps_and_merges_overlaps():
    busy = [(time(8), time(9, 30)), (time(10), time(12)), (time(11), time(13)), (time(17, 30), time(19))]
    slots = compute_available_slots(busy, time(9), time(18), 60)
    assert slots == [(time(13), time(17, 30))]


def test_compute_available_slots_empty_day_is_whole_window():
    assert compute_available_slots([], time(9), time(18), 30) == [(time(9), time(18))]


def test_blocking_conflicts_ignores_free_in_both_directions():
    free, busy = _Entry(ScheduleType.FREE), _Entry(ScheduleType.BUSY)
    assert blocking_conflicts([free, busy], ScheduleType.CLASS) == [busy]
    assert blocking_conflicts([free, busy], ScheduleType.FREE) == []


def test_non_overlapping_entries_succeed_then_overlap_conflicts(db_session, student):
    store = CalendarStore(db_session, student)
    spans = [("09:00", "10:00"), ("10:00", "11:30"), ("13:00", "14:00"), ("16:15", "17:00")]
    for start, end in spans:
        store.upsert(_entry(start, end))

    with pytest.raises(ConflictError) as ex:
        store.upsert(_entry("11:00", "12:00", title="overlaps the 10:00 block"))
    assert ex.value.status_code == 409
    assert ex.value.message == "選択した時間には既にスケジュールが入っています"
    assert len(ex.value.conflicts) == 1
    assert len(store.list_by_range(DAY, DAY)) == len(spans)


def test_free_entries_do_not_block(db_session, student):
    store = CalendarStore(db_session, student)
    store.upsert(_entry("09:00", "12:00", schedule_type="free", title="open"))
    store.upsert(_entry("10:00", "11:00", schedule_type="class", title="lecture"))
    store.upsert(_entry("10:30", "11:30", schedule_type="free", title="also open"))
    assert len(store.check_conflict(DAY, time(10), time(11))) == 3


def test_other_owner_entries_do_not_conflict(db_session, student, instructor):
    CalendarStore(db_session, instructor).upsert(_entry("09:00", "10:00"))
    CalendarStore(db_session, student).upsert(_entry("09:00", "10:00"))


def test_update_excludes_itself_from_conflict_check(db_session, student):
    store = CalendarStore(db_session, student)
    entry = store.upsert(_entry("09:00", "10:00"))
    updated = store.upsert({"end_time": "10:30", "location": "Room 2"}, entry.id)
    assert updated.end_time == time(10, 30)
    assert updated.location == "Room 2"


def test_upsert_validates_and_colors(db_session, student):
    store = CalendarStore(db_session, student)
    with pytest.raises(ValidationError):
        store.upsert(_entry("10:00", "09:00"))
    with pytest.raises(ValidationError):
        store.upsert(_entry("09:00", "10:00", title=""))
    with pytest.raises(ValidationError):
        store.upsert(_entry("09:00", "10:00", schedule_type="party"))
    entry = store.upsert(_entry("09:00", "10:00", schedule_type="class"))
    assert entry.color == ScheduleType.CLASS.default_color


def test_delete_and_ownership(db_session, student, instructor):
    store = CalendarStore(db_session, student)
    entry = store.upsert(_entry("09:00", "10:00"))
    with pytest.raises(NotFoundError):
        CalendarStore(db_session, instructor).delete(entry.id)
    store.delete(entry.id)
    assert store.list_by_range(DAY, DAY) == []


def test_list_by_range_is_inclusive_and_ordered(db_session, student):
    store = CalendarStore(db_session, student)
    store.upsert(_entry("13:00", "14:00", day=date(2024, 6, 4)))
    store.upsert(_entry("09:00", "10:00", day=date(2024, 6, 4)))
    store.upsert(_entry("15:00", "16:00", day=DAY))
    store.upsert(_entry("09:00", "10:00", day=date(2024, 6, 6)))
    out = store.list_by_range(DAY, date(2024, 6, 4))
    assert [(e.date, e.start_time) for e in out] == [
        (DAY, time(15)),
        (date(2024, 6, 4), time(9)),
        (date(2024, 6, 4), time(13)),
    ]
    with pytest.raises(ValidationError):
        store.list_by_range(date(2024, 6, 4), DAY)


def test_available_slots_uses_blocking_types_only(db_session, student):
    store = CalendarStore(db_session, student)
    store.upsert(_entry("10:00", "11:00", schedule_type="busy"))
    store.upsert(_entry("14:00", "15:00", schedule_type="interview"))
    store.upsert(_entry("16:00", "17:00", schedule_type="mentoring"))
    store.upsert(_entry("09:00", "18:00", schedule_type="free"))
    assert store.available_slots(DAY, 60) == [
        (time(9), time(10)),
        (time(11), time(14)),
        (time(15), time(18)),
    ]


def test_entry_links_only_to_owned_applications(db_session, student, instructor):
    own = ApplicationStore(db_session, student).create("Acme Corp", "Engineer")
    foreign = ApplicationStore(db_session, instructor).create("Globex", "Analyst")
    calendar = CalendarStore(db_session, student)

    with pytest.raises(NotFoundError):
        calendar.upsert({**_entry("09:00", "10:00"), "application_id": foreign.id})
    with pytest.raises(NotFoundError):
        calendar.upsert({**_entry("09:00", "10:00"), "application_id": "missing"})

    entry = calendar.upsert({**_entry("09:00", "10:00"), "application_id": own.id})
    assert entry.application_id == own.id
    assert calendar.list_by_range(DAY, DAY) == [entry]
