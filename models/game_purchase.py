from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel
from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint, func

from models.base import Base
from models.types import Money


# Ownership record. Immutable once written; a user owns a game at most once.
class GamePurchase(Base):
    __tablename__ = 'game_purchases'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    game_id = Column(Integer, ForeignKey('games.id', ondelete="CASCADE"), nullable=False, index=True)
    purchase_price = Column(Money, nullable=False)
    purchase_date = Column(DateTime, nullable=False, default=func.now(), index=True)

    __table_args__ = (
        UniqueConstraint('user_id', 'game_id', name='uq_game_purchases_user_game'),
    )


class GamePurchaseDTO(BaseModel):
    id: int | None = None
    user_id: int | None = None
    game_id: int | None = None
    purchase_price: Decimal | None = None
    purchase_date: datetime | None = None


class PurchaseHistoryEntryDTO(BaseModel):
    game_id: int
    title: str
    purchase_price: Decimal
    purchase_date: datetime
