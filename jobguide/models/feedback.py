from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from jobguide.database import Base
from jobguide.models.enums import FeedbackStatus, enum_column_type


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, nullable=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    category = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    status = Column(enum_column_type(FeedbackStatus), nullable=False, default=FeedbackStatus.PENDING)  # pending | sent | email_failed
    created_at = Column(DateTime(timezone=True), server_default=func.now())
