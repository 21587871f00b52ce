"""Interview slot state machine.

Setting or clearing an interview stage moves the application to a fixed
status, whatever the other stages hold. Stage ordering is deliberately not
validated: a final interview may be set while the first is still empty.
"""
import enum
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from jobguide.core.session import UserSession
from jobguide.core.timeutils import local_to_utc
from jobguide.errors import ValidationError, backend_errors
from jobguide.models.application import Application
from jobguide.models.enums import ApplicationStatus, InterviewStage
from jobguide.repos import application_repo

logger = logging.getLogger(__name__)


class SlotAction(str, enum.Enum):
    SET = "set"
    CLEAR = "clear"


TRANSITIONS: dict[tuple[InterviewStage, SlotAction], ApplicationStatus] = {
    (InterviewStage.FIRST, SlotAction.SET): ApplicationStatus.FIRST_INTERVIEW_WAITING,
    (InterviewStage.FIRST, SlotAction.CLEAR): ApplicationStatus.DOCUMENT_SCREENING,
    (InterviewStage.SECOND, SlotAction.SET): ApplicationStatus.SECOND_INTERVIEW_WAITING,
    (InterviewStage.SECOND, SlotAction.CLEAR): ApplicationStatus.FIRST_INTERVIEW_COMPLETE,
    (InterviewStage.FINAL, SlotAction.SET): ApplicationStatus.FINAL_INTERVIEW_WAITING,
    (InterviewStage.FINAL, SlotAction.CLEAR): ApplicationStatus.SECOND_INTERVIEW_COMPLETE,
}


def next_status(stage: InterviewStage, action: SlotAction) -> ApplicationStatus:
    return TRANSITIONS[(stage, action)]


def slot_fields(
    stage: InterviewStage,
    start_local: datetime | None,
    end_local: datetime | None = None,
) -> dict:
    """Column updates for setting (start given) or clearing (start None) a stage."""
    if start_local is None:
        return {
            stage.start_field: None,
            stage.end_field: None,
            "status": next_status(stage, SlotAction.CLEAR),
        }
    start_utc = local_to_utc(start_local)
    end_utc = local_to_utc(end_local) if end_local is not None else None
    if end_utc is not None and end_utc <= start_utc:
        raise ValidationError("終了時刻は開始時刻より後にしてください")
    return {
        stage.start_field: start_utc,
        stage.end_field: end_utc,
        "status": next_status(stage, SlotAction.SET),
    }


class InterviewSlotManager:
    def __init__(self, db: Session, session: UserSession):
        self.db = db
        self.session = session

    def set_interview(
        self,
        app: Application,
        stage: InterviewStage,
        start_local: datetime,
        end_local: datetime | None = None,
        *,
        commit: bool = True,
    ) -> Application:
        fields = slot_fields(stage, start_local, end_local)
        with backend_errors(self.db, "set interview"):
            application_repo.update(self.db, app, fields, commit=commit)
        logger.info(
            "Interview set: user=%s application=%s stage=%s status=%s",
            self.session.user_id, app.id, stage.value, fields["status"].value,
        )
        return app

    def clear_interview(self, app: Application, stage: InterviewStage, *, commit: bool = True) -> Application:
        fields = slot_fields(stage, None)
        with backend_errors(self.db, "clear interview"):
            application_repo.update(self.db, app, fields, commit=commit)
        logger.info(
            "Interview cleared: user=%s application=%s stage=%s status=%s",
            self.session.user_id, app.id, stage.value, fields["status"].value,
        )
        return app

    def set_offer_date(self, app: Application, received_local: datetime | None) -> Application:
        """Only the timestamp moves; the offer status is set by a direct status change."""
        value = local_to_utc(received_local) if received_local is not None else None
        with backend_errors(self.db, "set offer date"):
            return application_repo.update(self.db, app, {"offer_received_at": value})
