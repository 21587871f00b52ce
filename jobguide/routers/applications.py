import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobguide.core.session import UserSession
from jobguide.core.timeutils import local_to_utc, utc_to_local
from jobguide.database import get_db
from jobguide.dependencies import get_current_session
from jobguide.models.application import Application
from jobguide.models.enums import ApplicationStatus, InterviewStage
from jobguide.routers.schedule import schedule_to_response
from jobguide.schemas.application import (
    ApplicationCounts,
    ApplicationCreate,
    ApplicationDetailsIn,
    ApplicationDetailsResponse,
    ApplicationResponse,
    ApplicationUpdate,
    InterviewSet,
    InterviewSetResponse,
    OfferDateSet,
)
from jobguide.services.application_store import ApplicationStore
from jobguide.services.scheduling_facade import SchedulingFacade

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/applications", tags=["applications"])

_INSTANT_FIELDS = (
    "applied_at",
    "first_interview_at",
    "first_interview_end",
    "second_interview_at",
    "second_interview_end",
    "final_interview_at",
    "final_interview_end",
    "offer_received_at",
)


def application_to_response(app: Application) -> ApplicationResponse:
    """Stored instants are UTC; responses carry them in the display zone."""
    return ApplicationResponse(
        id=app.id,
        company_name=app.company_name,
        position=app.position,
        status=app.status,
        status_label=app.status.label,
        **{field: utc_to_local(getattr(app, field)) for field in _INSTANT_FIELDS},
    )


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def create_application(
    data: ApplicationCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    app = ApplicationStore(db, session).create(data.company_name, data.position)
    return application_to_response(app)


@router.get("", response_model=list[ApplicationResponse])
def list_applications(
    status: ApplicationStatus | None = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    store = ApplicationStore(db, session)
    apps = store.list_by_status(status) if status is not None else store.list_all()
    logger.debug("GET /applications user=%s status=%s count=%d", session.user_id, status, len(apps))
    return [application_to_response(a) for a in apps]


@router.get("/counts", response_model=ApplicationCounts)
def application_counts(
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    return ApplicationCounts(**ApplicationStore(db, session).counts_by_outcome())


@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application(
    application_id: str,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    return application_to_response(ApplicationStore(db, session).get(application_id))


@router.patch("/{application_id}", response_model=ApplicationResponse)
def update_application(
    application_id: str,
    data: ApplicationUpdate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Direct edit. Status is written as given, interview timestamps are untouched."""
    fields = data.model_dump(exclude_unset=True)
    if fields.get("applied_at") is not None:
        fields["applied_at"] = local_to_utc(fields["applied_at"])
    app = ApplicationStore(db, session).update(application_id, fields)
    return application_to_response(app)


@router.put("/{application_id}/interviews/{stage}", response_model=InterviewSetResponse)
def set_interview(
    application_id: str,
    stage: InterviewStage,
    data: InterviewSet,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    app, entry = SchedulingFacade(db, session).set_interview(application_id, stage, data.start, data.end)
    return InterviewSetResponse(
        **application_to_response(app).model_dump(),
        schedule=schedule_to_response(entry),
    )


@router.delete("/{application_id}/interviews/{stage}", response_model=ApplicationResponse)
def clear_interview(
    application_id: str,
    stage: InterviewStage,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    app = SchedulingFacade(db, session).clear_interview(application_id, stage)
    return application_to_response(app)


@router.put("/{application_id}/offer-date", response_model=ApplicationResponse)
def set_offer_date(
    application_id: str,
    data: OfferDateSet,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    app = SchedulingFacade(db, session).set_offer_date(application_id, data.received_at)
    return application_to_response(app)


@router.delete("/{application_id}/offer-date", response_model=ApplicationResponse)
def clear_offer_date(
    application_id: str,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    app = SchedulingFacade(db, session).set_offer_date(application_id, None)
    return application_to_response(app)


@router.get("/{application_id}/details", response_model=ApplicationDetailsResponse | None)
def get_details(
    application_id: str,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    return ApplicationStore(db, session).get_details(application_id)


@router.put("/{application_id}/details", response_model=ApplicationDetailsResponse)
def save_details(
    application_id: str,
    data: ApplicationDetailsIn,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    return ApplicationStore(db, session).save_details(application_id, data.model_dump(exclude_unset=True))
