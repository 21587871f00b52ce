from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobguide.core.session import UserSession
from jobguide.database import get_db
from jobguide.dependencies import get_current_session
from jobguide.models.message import UserMessage
from jobguide.repos.message_repo import list_for_user, mark_all_read, mark_read, unread_count
from jobguide.schemas.message import UnreadCount, UserMessageResponse

router = APIRouter(prefix="/messages", tags=["messages"])


def _to_response(um: UserMessage) -> UserMessageResponse:
    m = um.message
    return UserMessageResponse(
        id=um.id,
        message_id=um.message_id,
        title=m.title,
        content=m.content,
        message_type=m.message_type,
        is_global=m.is_global,
        is_read=um.is_read,
        read_at=um.read_at,
        created_at=um.created_at,
    )


@router.get("", response_model=list[UserMessageResponse])
def list_messages(
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    return [_to_response(um) for um in list_for_user(db, session.user_id) if um.message is not None]


@router.get("/unread-count", response_model=UnreadCount)
def get_unread_count(
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    return UnreadCount(count=unread_count(db, session.user_id))


@router.post("/{message_id}/read")
def read_message(
    message_id: str,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    return {"updated": mark_read(db, session.user_id, message_id)}


@router.post("/read-all")
def read_all_messages(
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    return {"updated": mark_all_read(db, session.user_id)}
