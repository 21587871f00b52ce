import logging

from sqlalchemy.orm import Session

from jobguide.core.session import UserSession
from jobguide.errors import NotFoundError, ValidationError, backend_errors
from jobguide.models.application import Application, ApplicationDetails
from jobguide.models.enums import ApplicationStatus
from jobguide.repos import application_repo

logger = logging.getLogger(__name__)

# Columns that may be changed but never emptied
REQUIRED_FIELDS = ("company_name", "position", "status", "applied_at")


class ApplicationStore:
    """Canonical application records of the signed-in user."""

    def __init__(self, db: Session, session: UserSession):
        self.db = db
        self.session = session

    def create(self, company_name: str | None, position: str | None) -> Application:
        company_name = (company_name or "").strip()
        position = (position or "").strip()
        if not company_name or not position:
            raise ValidationError("企業名と職種は必須です")
        with backend_errors(self.db, "create application"):
            app = application_repo.create(self.db, self.session.user_id, company_name, position)
        logger.info("Application created: user=%s id=%s company=%r", self.session.user_id, app.id, company_name)
        return app

    def get(self, application_id: str) -> Application:
        with backend_errors(self.db, "get application"):
            app = application_repo.get_for_user(self.db, application_id, self.session.user_id)
        if app is None:
            raise NotFoundError("応募情報が見つかりません")
        return app

    def update(self, application_id: str, fields: dict, *, commit: bool = True) -> Application:
        """Merge fields as given. Status/timestamp consistency is the caller's job."""
        emptied = [
            key for key in REQUIRED_FIELDS
            if key in fields and (fields[key] is None or (isinstance(fields[key], str) and not fields[key].strip()))
        ]
        if emptied:
            raise ValidationError(f"必須項目は空にできません: {', '.join(emptied)}")
        app = self.get(application_id)
        with backend_errors(self.db, "update application"):
            return application_repo.update(self.db, app, fields, commit=commit)

    def list_all(self) -> list[Application]:
        with backend_errors(self.db, "list applications"):
            return application_repo.list_for_user(self.db, self.session.user_id)

    def list_by_status(self, status: ApplicationStatus) -> list[Application]:
        with backend_errors(self.db, "list applications by status"):
            return application_repo.list_for_user(self.db, self.session.user_id, status=status)

    def counts_by_outcome(self) -> dict:
        counts = {"total": 0, "rejected": 0, "offered": 0, "in_progress": 0}
        for app in self.list_all():
            counts["total"] += 1
            if app.status == ApplicationStatus.REJECTED:
                counts["rejected"] += 1
            elif app.status == ApplicationStatus.OFFER:
                counts["offered"] += 1
            else:
                counts["in_progress"] += 1
        return counts

    def get_details(self, application_id: str) -> ApplicationDetails | None:
        app = self.get(application_id)
        with backend_errors(self.db, "get application details"):
            return application_repo.get_details(self.db, app.id)

    def save_details(self, application_id: str, fields: dict) -> ApplicationDetails:
        """Offer terms; a second save for the same application updates the first row."""
        app = self.get(application_id)
        if app.status != ApplicationStatus.OFFER:
            raise ValidationError("内定後のみ条件を登録できます")
        with backend_errors(self.db, "save application details"):
            details = application_repo.upsert_details(self.db, app.id, fields)
        logger.info("Offer details saved: application=%s", app.id)
        return details
