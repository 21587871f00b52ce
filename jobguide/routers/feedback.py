from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobguide.database import get_db
from jobguide.models.enums import FeedbackStatus
from jobguide.schemas.feedback import FeedbackCreate, FeedbackResponse
from jobguide.services.feedback_service import submit_feedback

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post("", response_model=FeedbackResponse)
def post_feedback(data: FeedbackCreate, db: Session = Depends(get_db)):
    """Succeeds once the row is stored, whether or not the notification mail went out."""
    row = submit_feedback(
        db,
        name=data.name,
        email=data.email,
        category=data.category,
        subject=data.subject,
        message=data.message,
        user_id=data.user_id,
    )
    return FeedbackResponse(success=True, id=row.id, email_sent=row.status == FeedbackStatus.SENT)
