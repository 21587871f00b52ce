"""Wall-clock / UTC conversions and HH:mm arithmetic.

Interview instants are stored in UTC and entered/displayed in the configured
display zone (Asia/Tokyo). Calendar rows carry a plain date plus naive
wall-clock times.
"""
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from jobguide.config import settings
from jobguide.errors import ValidationError

END_OF_DAY = time(23, 59)


def display_zone() -> ZoneInfo:
    return ZoneInfo(settings.display_timezone)


def local_to_utc(value: datetime) -> datetime:
    """Interpret a naive wall-clock value in the display zone and return UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=display_zone())
    return value.astimezone(timezone.utc)


def utc_to_local(value: datetime | None) -> datetime | None:
    """Render a stored instant in the display zone. Naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(display_zone())


def parse_time(value: str | time) -> time:
    """Accept HH:mm or HH:mm:ss."""
    if isinstance(value, time):
        return value.replace(microsecond=0)
    text = (value or "").strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"時刻の形式が正しくありません: {value!r}")


def format_time(value: time) -> str:
    return value.strftime("%H:%M")


def minutes_between(start: time, end: time) -> int:
    return (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)


def ensure_ordered(start: time, end: time) -> None:
    if end <= start:
        raise ValidationError("終了時刻は開始時刻より後にしてください")


def working_hours() -> tuple[time, time]:
    return parse_time(settings.working_hours_start), parse_time(settings.working_hours_end)


def mirror_window(
    start_utc: datetime,
    end_utc: datetime | None,
    default_minutes: int | None = None,
) -> tuple[date, time, time]:
    """Calendar day and wall-clock span for an interview instant.

    Without an end the span defaults to ``default_minutes``. An end falling
    on another local day is clamped to 23:59 of the start day.
    """
    minutes = default_minutes if default_minutes is not None else settings.default_interview_minutes
    start_local = utc_to_local(start_utc)
    if end_utc is None:
        end_local = start_local + timedelta(minutes=minutes)
    else:
        end_local = utc_to_local(end_utc)

    start_t = start_local.time().replace(second=0, microsecond=0)
    if end_local.date() != start_local.date():
        end_t = END_OF_DAY
    else:
        end_t = end_local.time().replace(second=0, microsecond=0)
    ensure_ordered(start_t, end_t)
    return start_local.date(), start_t, end_t
