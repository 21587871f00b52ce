from datetime import datetime, timezone

from sqlalchemy.orm import Session, joinedload

from jobguide.models.message import UserMessage


def list_for_user(db: Session, user_id: str) -> list[UserMessage]:
    return (
        db.query(UserMessage)
        .options(joinedload(UserMessage.message))
        .filter(UserMessage.user_id == user_id)
        .order_by(UserMessage.created_at.desc())
        .all()
    )


def unread_count(db: Session, user_id: str) -> int:
    return (
        db.query(UserMessage)
        .filter(UserMessage.user_id == user_id, UserMessage.is_read.is_(False))
        .count()
    )


def mark_read(db: Session, user_id: str, message_id: str) -> int:
    """Returns number of rows marked."""
    count = (
        db.query(UserMessage)
        .filter(UserMessage.user_id == user_id, UserMessage.message_id == message_id)
        .update(
            {"is_read": True, "read_at": datetime.now(timezone.utc)},
            synchronize_session=False,
        )
    )
    db.commit()
    return count


def mark_all_read(db: Session, user_id: str) -> int:
    count = (
        db.query(UserMessage)
        .filter(UserMessage.user_id == user_id, UserMessage.is_read.is_(False))
        .update(
            {"is_read": True, "read_at": datetime.now(timezone.utc)},
            synchronize_session=False,
        )
    )
    db.commit()
    return count
