from datetime import datetime

from pydantic import BaseModel

from jobguide.models.enums import MessageType


class UserMessageResponse(BaseModel):
    id: str
    message_id: str
    title: str
    content: str
    message_type: MessageType
    is_global: bool
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime | None = None


class UnreadCount(BaseModel):
    count: int
