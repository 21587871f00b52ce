from datetime import datetime, timezone

from sqlalchemy.orm import Session

from jobguide.core.security import generate_id
from jobguide.models.application import Application, ApplicationDetails
from jobguide.models.enums import ApplicationStatus

# Columns a caller may merge through update(); identity and audit columns excluded
UPDATABLE_FIELDS = (
    "company_name",
    "position",
    "status",
    "applied_at",
    "first_interview_at",
    "first_interview_end",
    "second_interview_at",
    "second_interview_end",
    "final_interview_at",
    "final_interview_end",
    "offer_received_at",
)

DETAIL_FIELDS = (
    "annual_salary",
    "monthly_salary",
    "benefits",
    "location",
    "work_hours",
    "other_conditions",
)


def _finish(db: Session, obj, commit: bool):
    if commit:
        db.commit()
        db.refresh(obj)
    else:
        db.flush()
    return obj


def create(db: Session, user_id: str, company_name: str, position: str) -> Application:
    app = Application(
        id=generate_id(),
        user_id=user_id,
        company_name=company_name,
        position=position,
        status=ApplicationStatus.DOCUMENT_SCREENING,
        applied_at=datetime.now(timezone.utc),
    )
    db.add(app)
    db.commit()
    db.refresh(app)
    return app


def get_by_id(db: Session, application_id: str) -> Application | None:
    return db.query(Application).filter(Application.id == application_id).first()


def get_for_user(db: Session, application_id: str, user_id: str) -> Application | None:
    return (
        db.query(Application)
        .filter(Application.id == application_id, Application.user_id == user_id)
        .first()
    )


def list_for_user(
    db: Session,
    user_id: str,
    status: ApplicationStatus | None = None,
) -> list[Application]:
    q = db.query(Application).filter(Application.user_id == user_id)
    if status is not None:
        q = q.filter(Application.status == status)
    return q.order_by(Application.applied_at.desc()).all()


def update(db: Session, app: Application, fields: dict, *, commit: bool = True) -> Application:
    """Merge ``fields`` into ``app``. Unknown keys are ignored."""
    for key, value in fields.items():
        if key in UPDATABLE_FIELDS:
            setattr(app, key, value)
    return _finish(db, app, commit)


def get_details(db: Session, application_id: str) -> ApplicationDetails | None:
    return (
        db.query(ApplicationDetails)
        .filter(ApplicationDetails.application_id == application_id)
        .first()
    )


def upsert_details(db: Session, application_id: str, fields: dict) -> ApplicationDetails:
    """Update the existing offer-terms row for the application, or insert one."""
    details = get_details(db, application_id)
    if details is None:
        details = ApplicationDetails(id=generate_id(), application_id=application_id, benefits=[])
        db.add(details)
    for key, value in fields.items():
        if key in DETAIL_FIELDS:
            setattr(details, key, value)
    db.commit()
    db.refresh(details)
    return details
