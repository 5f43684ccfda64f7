from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint, func

from models.base import Base


# One redemption per user per coupon. Rows go away with the coupon (CASCADE),
# so history of exhausted coupons is not kept.
class CouponUsage(Base):
    __tablename__ = 'coupon_usages'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False)
    coupon_id = Column(Integer, ForeignKey('coupons.id', ondelete="CASCADE"), nullable=False)
    used_at = Column(DateTime, default=func.now())

    __table_args__ = (
        UniqueConstraint('user_id', 'coupon_id', name='uq_coupon_usages_user_coupon'),
    )


class CouponUsageDTO(BaseModel):
    id: int | None = None
    user_id: int | None = None
    coupon_id: int | None = None
    used_at: datetime | None = None
