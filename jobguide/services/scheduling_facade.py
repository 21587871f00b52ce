"""Single entry point for interview changes.

Setting an interview updates the application and its mirrored calendar
entry in one database transaction: either both rows change or neither does.
Clearing an interview leaves the mirrored entry on the calendar.
"""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from jobguide.core.session import UserSession
from jobguide.core.timeutils import mirror_window
from jobguide.errors import backend_errors
from jobguide.models.application import Application
from jobguide.models.enums import InterviewStage, ScheduleType
from jobguide.models.student_schedule import StudentSchedule
from jobguide.repos import schedule_repo
from jobguide.services.application_store import ApplicationStore
from jobguide.services.calendar_store import CalendarStore
from jobguide.services.interview_slots import InterviewSlotManager

logger = logging.getLogger(__name__)

MIRROR_COLOR = "#3b82f6"


def mirror_title(company_name: str, stage: InterviewStage) -> str:
    return f"{company_name} - {stage.label}面接"


def mirror_description(company_name: str, stage: InterviewStage) -> str:
    return f"{company_name}の{stage.label}面接"


class SchedulingFacade:
    def __init__(self, db: Session, session: UserSession):
        self.db = db
        self.session = session
        self.applications = ApplicationStore(db, session)
        self.slots = InterviewSlotManager(db, session)
        self.calendar = CalendarStore(db, session)

    def set_interview(
        self,
        application_id: str,
        stage: InterviewStage,
        start_local: datetime,
        end_local: datetime | None = None,
    ) -> tuple[Application, StudentSchedule]:
        """Schedule a stage and mirror it onto the calendar, atomically.

        A calendar conflict aborts the whole change with ConflictError.
        """
        app = self.applications.get(application_id)
        with backend_errors(self.db, "set interview with calendar mirror"):
            self.slots.set_interview(app, stage, start_local, end_local, commit=False)
            entry = self._upsert_mirror(app, stage)
            self.db.commit()
            self.db.refresh(app)
            self.db.refresh(entry)
        return app, entry

    def clear_interview(self, application_id: str, stage: InterviewStage) -> Application:
        app = self.applications.get(application_id)
        return self.slots.clear_interview(app, stage)

    def set_offer_date(self, application_id: str, received_local: datetime | None) -> Application:
        app = self.applications.get(application_id)
        return self.slots.set_offer_date(app, received_local)

    def _upsert_mirror(self, app: Application, stage: InterviewStage) -> StudentSchedule:
        start_utc = getattr(app, stage.start_field)
        end_utc = getattr(app, stage.end_field)
        day, start, end = mirror_window(start_utc, end_utc)
        title = mirror_title(app.company_name, stage)
        existing = schedule_repo.find_mirror(self.db, self.session.user_id, app.id, stage)
        fields = {
            "date": day,
            "start_time": start,
            "end_time": end,
            "schedule_type": ScheduleType.INTERVIEW,
            "title": title,
            "description": mirror_description(app.company_name, stage),
            "color": MIRROR_COLOR,
            "application_id": app.id,
            "interview_stage": stage,
        }
        entry = self.calendar.upsert(fields, existing.id if existing else None, commit=False)
        logger.info(
            "Interview mirrored: application=%s stage=%s date=%s %s-%s",
            app.id, stage.value, day, start, end,
        )
        return entry
