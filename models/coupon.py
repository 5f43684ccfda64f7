from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator
from sqlalchemy import Column, Integer, String, Boolean, DateTime, func, CheckConstraint
from sqlalchemy import Enum as SQLEnum

from enums.discount_type import DiscountType
from models.base import Base
from models.types import Money


class Coupon(Base):
    __tablename__ = 'coupons'

    id = Column(Integer, primary_key=True)
    # Always stored uppercase, lookups normalize the same way
    code = Column(String(64), unique=True, nullable=False, index=True)
    discount_type = Column(SQLEnum(DiscountType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    discount_value = Column(Money, nullable=False)
    expiry_date = Column(DateTime, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    # Remaining uses. NULL means unlimited; checkout decrements it and deletes
    # the row once it reaches zero.
    max_uses = Column(Integer, nullable=True)
    uses_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        CheckConstraint('discount_value > 0', name='check_coupon_value_positive'),
        CheckConstraint('uses_count >= 0', name='check_coupon_uses_count_positive'),
    )


class CouponDTO(BaseModel):
    id: int | None = None
    code: str | None = None
    discount_type: DiscountType | None = None
    discount_value: Decimal | None = None
    expiry_date: datetime | None = None
    is_active: bool | None = None
    max_uses: int | None = None
    uses_count: int | None = None
    created_at: datetime | None = None

    @field_validator('code', mode='before')
    @classmethod
    def normalize_code(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def is_consumable(self) -> bool:
        return self.max_uses is not None
