"""SQLAlchemy model for verified instructor profiles."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from gymhub.infrastructure.database import Base
from gymhub.utils import now_in_app_naive_datetime


class InstructorProfileModel(Base):
    """Database representation of a verified instructor."""

    __tablename__ = "instructor_profile"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, unique=True, index=True)
    specialization = Column(String(60), nullable=False)
    experience_years = Column(Integer, nullable=False, default=0)
    is_freelance = Column(Boolean, nullable=False, default=False, index=True)
    application_id = Column(Integer, ForeignKey("request.id"), nullable=True)
    verified_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["InstructorProfileModel"]
