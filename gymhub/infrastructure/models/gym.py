"""SQLAlchemy models for gyms and their instructor roster."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from gymhub.infrastructure.database import Base
from gymhub.utils import now_in_app_naive_datetime


class GymModel(Base):
    """Database representation of a gym."""

    __tablename__ = "gym"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    name = Column(String(120), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    verification_status = Column(String(20), nullable=False, default="pending", index=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime, nullable=True, onupdate=now_in_app_naive_datetime)

    instructors = relationship(
        "GymInstructorModel",
        back_populates="gym",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class GymInstructorModel(Base):
    """Association between a gym and an instructor on its roster."""

    __tablename__ = "gym_instructor"
    __table_args__ = (
        UniqueConstraint("gym_id", "instructor_id", name="uq_gym_instructor"),
    )

    id = Column(Integer, primary_key=True, index=True)
    gym_id = Column(
        Integer, ForeignKey("gym.id", ondelete="CASCADE"), nullable=False, index=True
    )
    instructor_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    engagement = Column(String(20), nullable=False, default="staff")
    joined_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)

    gym = relationship("GymModel", back_populates="instructors")


__all__ = ["GymInstructorModel", "GymModel"]
