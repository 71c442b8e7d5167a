"""SQLAlchemy model for reviewable requests."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String, Text

from gymhub.infrastructure.database import Base
from gymhub.utils import now_in_app_naive_datetime


class RequestModel(Base):
    """Database representation of a submitted request and its decision."""

    __tablename__ = "request"
    __table_args__ = (
        Index("ix_request_kind_state", "kind", "state"),
        Index("ix_request_subject", "kind", "subject_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(String(40), nullable=False)
    state = Column(String(20), nullable=False, default="pending")
    submitted_by = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    subject_id = Column(Integer, nullable=False)
    addressed_to = Column(Integer, ForeignKey("user.id"), nullable=True, index=True)
    payload = Column(JSON, nullable=False, default=dict)
    reviewed_by = Column(Integer, ForeignKey("user.id"), nullable=True)
    review_note = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime, nullable=True)
    decided_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True)


__all__ = ["RequestModel"]
