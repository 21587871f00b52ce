import enum

from sqlalchemy import Enum


class UserRole(str, enum.Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"


class ApplicationStatus(str, enum.Enum):
    """Recruitment stages in process order."""

    DOCUMENT_SCREENING = "document_screening"
    FIRST_INTERVIEW_WAITING = "first_interview_waiting"
    FIRST_INTERVIEW_COMPLETE = "first_interview_complete"
    SECOND_INTERVIEW_WAITING = "second_interview_waiting"
    SECOND_INTERVIEW_COMPLETE = "second_interview_complete"
    FINAL_INTERVIEW_WAITING = "final_interview_waiting"
    FINAL_INTERVIEW_COMPLETE = "final_interview_complete"
    OFFER = "offer"
    REJECTED = "rejected"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    ApplicationStatus.DOCUMENT_SCREENING: "書類選考中",
    ApplicationStatus.FIRST_INTERVIEW_WAITING: "一次面接待ち",
    ApplicationStatus.FIRST_INTERVIEW_COMPLETE: "一次面接完了",
    ApplicationStatus.SECOND_INTERVIEW_WAITING: "二次面接待ち",
    ApplicationStatus.SECOND_INTERVIEW_COMPLETE: "二次面接完了",
    ApplicationStatus.FINAL_INTERVIEW_WAITING: "最終面接待ち",
    ApplicationStatus.FINAL_INTERVIEW_COMPLETE: "最終面接完了",
    ApplicationStatus.OFFER: "内定",
    ApplicationStatus.REJECTED: "不合格",
}


class InterviewStage(str, enum.Enum):
    FIRST = "first"
    SECOND = "second"
    FINAL = "final"

    @property
    def label(self) -> str:
        return {"first": "一次", "second": "二次", "final": "最終"}[self.value]

    @property
    def start_field(self) -> str:
        return f"{self.value}_interview_at"

    @property
    def end_field(self) -> str:
        return f"{self.value}_interview_end"


class ScheduleType(str, enum.Enum):
    FREE = "free"
    BUSY = "busy"
    CLASS = "class"
    INTERVIEW = "interview"
    MENTORING = "mentoring"
    OTHER = "other"

    @property
    def default_color(self) -> str:
        return {
            "free": "#10b981",
            "busy": "#ef4444",
            "class": "#f59e42",
            "interview": "#a78bfa",
            "mentoring": "#3b82f6",
            "other": "#6b7280",
        }[self.value]


# Entry types that make a slot unavailable when computing free time
BLOCKING_SCHEDULE_TYPES = (ScheduleType.BUSY, ScheduleType.CLASS, ScheduleType.INTERVIEW)


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"

    @property
    def label(self) -> str:
        return {
            "pending": "承認待ち",
            "confirmed": "確定",
            "completed": "完了",
            "cancelled": "キャンセル",
            "rejected": "却下",
        }[self.value]


# Bookings in these states hold the instructor's time
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class MessageType(str, enum.Enum):
    NOTIFICATION = "notification"
    ANNOUNCEMENT = "announcement"
    ALERT = "alert"


class FeedbackStatus(str, enum.Enum):
    PENDING = "pending"
    SENT = "sent"
    EMAIL_FAILED = "email_failed"


def enum_column_type(enum_cls):
    """Non-native SQL enum that stores ``.value`` and rejects unknown strings."""
    return Enum(
        enum_cls,
        native_enum=False,
        validate_strings=True,
        values_callable=lambda members: [m.value for m in members],
        length=32,
    )
