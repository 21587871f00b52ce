from sqlalchemy import Boolean, Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from jobguide.database import Base
from jobguide.models.enums import MessageType, enum_column_type


class Message(Base):
    __tablename__ = "messages"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    message_type = Column(enum_column_type(MessageType), nullable=False, default=MessageType.NOTIFICATION)
    is_global = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class UserMessage(Base):
    """Per-recipient delivery and read state of a message."""

    __tablename__ = "user_messages"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    message_id = Column(String, ForeignKey("messages.id", ondelete="CASCADE"), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    message = relationship("Message")
