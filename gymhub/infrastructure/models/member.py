"""SQLAlchemy model for gym members."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from gymhub.infrastructure.database import Base
from gymhub.utils import now_in_app_naive_datetime


class MemberModel(Base):
    """Database representation of a gym membership."""

    __tablename__ = "member"
    __table_args__ = (UniqueConstraint("gym_id", "user_id", name="uq_member_gym_user"),)

    id = Column(Integer, primary_key=True, index=True)
    gym_id = Column(Integer, ForeignKey("gym.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    membership_plan = Column(String(60), nullable=False)
    payment_method = Column(String(20), nullable=False, default="manual")
    status = Column(String(20), nullable=False, default="inactive")
    payment_status = Column(String(20), nullable=False, default="pending")
    last_payment_date = Column(DateTime, nullable=True)
    next_payment_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime, nullable=True, onupdate=now_in_app_naive_datetime)


__all__ = ["MemberModel"]
