import logging
import smtplib
from email.message import EmailMessage

from sqlalchemy.orm import Session

from jobguide.config import settings
from jobguide.errors import backend_errors
from jobguide.models.enums import FeedbackStatus
from jobguide.models.feedback import Feedback
from jobguide.repos import feedback_repo

logger = logging.getLogger(__name__)


def build_feedback_email(row: Feedback) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = f"[Feedback] {row.subject}"
    msg["From"] = settings.feedback_from_email
    msg["To"] = settings.feedback_to_email
    msg["Reply-To"] = row.email
    msg.set_content(
        "New feedback received:\n\n"
        f"Name: {row.name}\n"
        f"Email: {row.email}\n"
        f"Category: {row.category}\n"
        f"Subject: {row.subject}\n\n"
        f"Message:\n{row.message}\n"
    )
    return msg


def send_feedback_email(row: Feedback) -> None:
    """Raises on any delivery problem, including missing SMTP configuration."""
    if not settings.smtp_host:
        raise RuntimeError("SMTP host is not configured")
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=15) as smtp:
        if settings.smtp_use_tls:
            smtp.starttls()
        if settings.smtp_username:
            smtp.login(settings.smtp_username, settings.smtp_password)
        smtp.send_message(build_feedback_email(row))


def submit_feedback(
    db: Session,
    name: str,
    email: str,
    category: str,
    subject: str,
    message: str,
    user_id: str | None = None,
) -> Feedback:
    """Persist feedback, then try the notification mail.

    Mail failure only flips the row to ``email_failed``; the caller still
    reports success because the feedback itself was stored.
    """
    with backend_errors(db, "create feedback"):
        row = feedback_repo.create(db, name, email, category, subject, message, user_id=user_id)
    logger.info("Feedback stored: id=%s category=%s", row.id, category)

    try:
        send_feedback_email(row)
        status = FeedbackStatus.SENT
    except Exception as e:
        logger.warning("Feedback email failed for id=%s: %s", row.id, e)
        status = FeedbackStatus.EMAIL_FAILED

    try:
        feedback_repo.set_status(db, row, status)
    except Exception:
        logger.exception("Could not record feedback mail status for id=%s", row.id)
        db.rollback()
    return row
