from sqlalchemy.orm import Session

from jobguide.core.security import generate_id
from jobguide.models.enums import FeedbackStatus
from jobguide.models.feedback import Feedback


def create(
    db: Session,
    name: str,
    email: str,
    category: str,
    subject: str,
    message: str,
    user_id: str | None = None,
) -> Feedback:
    row = Feedback(
        id=generate_id(),
        user_id=user_id,
        name=name,
        email=email,
        category=category,
        subject=subject,
        message=message,
        status=FeedbackStatus.PENDING,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def set_status(db: Session, row: Feedback, status: FeedbackStatus) -> Feedback:
    row.status = status
    db.commit()
    return row
