from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel
from sqlalchemy import Column, Integer, ForeignKey, DateTime, String, func, CheckConstraint

from enums.topup_status import TopupStatus
from models.base import Base
from models.types import Money


class TopupHistory(Base):
    __tablename__ = 'topup_history'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Money, nullable=False)
    payment_method = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default=TopupStatus.COMPLETED.value)
    transaction_date = Column(DateTime, nullable=False, default=func.now(), index=True)

    __table_args__ = (
        CheckConstraint('amount > 0', name='check_topup_amount_positive'),
    )


class TopupHistoryDTO(BaseModel):
    id: int | None = None
    user_id: int | None = None
    amount: Decimal | None = None
    payment_method: str | None = None
    status: str | None = None
    transaction_date: datetime | None = None
