from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel
from sqlalchemy import Column, Integer, DateTime, String, func, CheckConstraint

from models.base import Base
from models.types import Money


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime, default=func.now())

    # Wallet: the only payment instrument, debited at checkout and direct purchase
    wallet = Column(Money, nullable=False, default=Decimal("0.00"))

    __table_args__ = (
        CheckConstraint('wallet >= 0', name='check_wallet_balance_positive'),
    )


class UserDTO(BaseModel):
    id: int | None = None
    name: str | None = None
    email: str | None = None
    created_at: datetime | None = None
    wallet: Decimal | None = None


class WalletDTO(BaseModel):
    user_id: int
    name: str
    wallet: Decimal
