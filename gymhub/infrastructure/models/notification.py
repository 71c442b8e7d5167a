"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String, Text

from gymhub.infrastructure.database import Base
from gymhub.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_feed", "recipient_id", "created_at", "id"),
        Index("ix_notification_unread", "recipient_id", "read_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id = Column(Integer, ForeignKey("user.id"), nullable=True)
    type = Column(String(50), nullable=False)
    title = Column(String(120), nullable=False)
    message = Column(Text, nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    link = Column(String(200), nullable=True)
    priority = Column(String(10), nullable=False, default="medium")
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    read_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True, index=True)


__all__ = ["NotificationModel"]
