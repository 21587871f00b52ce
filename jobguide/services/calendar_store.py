"""Student calendar with overlap checking and free-slot computation.

Overlap uses half-open intervals: ``existing.start < new_end and
existing.end > new_start``, so back-to-back entries never collide. Entries of
type ``free`` mark availability and are ignored by the conflict check in both
directions.
"""
import logging
from datetime import date, time
from typing import Iterable

from sqlalchemy.orm import Session

from jobguide.core.session import UserSession
from jobguide.core.timeutils import ensure_ordered, minutes_between, parse_time, working_hours
from jobguide.errors import ConflictError, NotFoundError, ValidationError, backend_errors
from jobguide.models.enums import BLOCKING_SCHEDULE_TYPES, ScheduleType
from jobguide.models.student_schedule import StudentSchedule
from jobguide.repos import application_repo, schedule_repo

logger = logging.getLogger(__name__)


def blocking_conflicts(candidates: Iterable[StudentSchedule], new_type: ScheduleType) -> list[StudentSchedule]:
    """Overlapping entries that forbid writing an entry of ``new_type``."""
    if new_type == ScheduleType.FREE:
        return []
    return [c for c in candidates if c.schedule_type != ScheduleType.FREE]


def compute_available_slots(
    busy: Iterable[tuple[time, time]],
    window_start: time,
    window_end: time,
    min_duration_minutes: int,
) -> list[tuple[time, time]]:
    """Gaps between busy intervals inside the window, at least ``min_duration_minutes`` long.

    ``busy`` must be sorted by start time. Busy intervals may overlap each
    other or stick out of the window.
    """
    slots: list[tuple[time, time]] = []
    cursor = window_start
    for start, end in busy:
        if cursor >= window_end:
            break
        gap_end = min(start, window_end)
        if cursor < gap_end and minutes_between(cursor, gap_end) >= min_duration_minutes:
            slots.append((cursor, gap_end))
        if end > cursor:
            cursor = end
    if cursor < window_end and minutes_between(cursor, window_end) >= min_duration_minutes:
        slots.append((cursor, window_end))
    return slots


class CalendarStore:
    def __init__(self, db: Session, session: UserSession):
        self.db = db
        self.session = session

    @property
    def owner_id(self) -> str:
        return self.session.user_id

    def get(self, schedule_id: str) -> StudentSchedule:
        with backend_errors(self.db, "get schedule"):
            entry = schedule_repo.get_by_id(self.db, schedule_id)
        if entry is None or entry.student_id != self.owner_id:
            raise NotFoundError("スケジュールが見つかりません")
        return entry

    def check_conflict(
        self,
        day: date,
        start: time,
        end: time,
        exclude_id: str | None = None,
    ) -> list[StudentSchedule]:
        """All of the owner's entries on ``day`` overlapping [start, end), free ones included."""
        with backend_errors(self.db, "check schedule conflict"):
            return schedule_repo.find_overlapping(self.db, self.owner_id, day, start, end, exclude_id)

    def _normalize(self, fields: dict, current: StudentSchedule | None = None) -> dict:
        data = dict(fields)
        for key in ("start_time", "end_time"):
            if data.get(key) is not None:
                data[key] = parse_time(data[key])
        if data.get("schedule_type") is not None:
            try:
                data["schedule_type"] = ScheduleType(data["schedule_type"])
            except ValueError as e:
                raise ValidationError(f"不明なスケジュール種別です: {data['schedule_type']!r}") from e

        merged = {
            key: data.get(key) if data.get(key) is not None else getattr(current, key, None)
            for key in ("date", "start_time", "end_time", "schedule_type", "title")
        }
        missing = [key for key, value in merged.items() if value in (None, "")]
        if missing:
            raise ValidationError(f"必須項目を入力してください: {', '.join(missing)}")
        ensure_ordered(merged["start_time"], merged["end_time"])
        if current is None and not data.get("color"):
            data["color"] = merged["schedule_type"].default_color
        return {**data, **merged}

    def _check_application_owner(self, application_id: str | None, current: StudentSchedule | None) -> None:
        """An entry may only link to one of the owner's own applications."""
        if not application_id or (current is not None and current.application_id == application_id):
            return
        with backend_errors(self.db, "get linked application"):
            app = application_repo.get_for_user(self.db, application_id, self.owner_id)
        if app is None:
            raise NotFoundError("応募情報が見つかりません")

    def upsert(
        self,
        fields: dict,
        schedule_id: str | None = None,
        *,
        commit: bool = True,
    ) -> StudentSchedule:
        """Create an entry, or update ``schedule_id``, after the conflict check."""
        current = self.get(schedule_id) if schedule_id else None
        data = self._normalize(fields, current)
        self._check_application_owner(data.get("application_id"), current)

        overlapping = self.check_conflict(
            data["date"], data["start_time"], data["end_time"], exclude_id=schedule_id
        )
        conflicts = blocking_conflicts(overlapping, data["schedule_type"])
        if conflicts:
            logger.info(
                "Schedule conflict: user=%s date=%s %s-%s with %d entries",
                self.owner_id, data["date"], data["start_time"], data["end_time"], len(conflicts),
            )
            raise ConflictError(conflicts=conflicts)

        with backend_errors(self.db, "upsert schedule"):
            if current is None:
                entry = schedule_repo.create(self.db, self.owner_id, data, commit=commit)
            else:
                entry = schedule_repo.update(self.db, current, data, commit=commit)
        logger.info("Schedule saved: user=%s id=%s type=%s", self.owner_id, entry.id, entry.schedule_type.value)
        return entry

    def delete(self, schedule_id: str) -> None:
        """Unconditional; an originating application is left untouched."""
        entry = self.get(schedule_id)
        with backend_errors(self.db, "delete schedule"):
            schedule_repo.delete(self.db, entry)
        logger.info("Schedule deleted: user=%s id=%s", self.owner_id, schedule_id)

    def list_by_range(self, start_date: date, end_date: date) -> list[StudentSchedule]:
        if end_date < start_date:
            raise ValidationError("終了日は開始日以降にしてください")
        with backend_errors(self.db, "list schedule"):
            return schedule_repo.list_range(self.db, self.owner_id, start_date, end_date)

    def available_slots(self, day: date, min_duration_minutes: int = 60) -> list[tuple[time, time]]:
        if min_duration_minutes <= 0:
            raise ValidationError("時間枠の長さは1分以上にしてください")
        with backend_errors(self.db, "list busy schedule"):
            busy = schedule_repo.list_for_day(self.db, self.owner_id, day, BLOCKING_SCHEDULE_TYPES)
        window_start, window_end = working_hours()
        return compute_available_slots(
            [(e.start_time, e.end_time) for e in busy],
            window_start,
            window_end,
            min_duration_minutes,
        )
