from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel
from sqlalchemy import Column, Integer, String, Date, DateTime, Text, func, CheckConstraint

from models.base import Base
from models.types import Money


# Catalog entry. Its current price is what checkout charges, carts never cache it.
class Game(Base):
    __tablename__ = 'games'

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False, index=True)
    price = Column(Money, nullable=False, default=Decimal("0.00"))
    description = Column(Text, nullable=True)
    release_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        CheckConstraint('price >= 0', name='check_game_price_non_negative'),
    )


class GameDTO(BaseModel):
    id: int | None = None
    title: str | None = None
    price: Decimal | None = None
    description: str | None = None
    release_date: date | None = None
    created_at: datetime | None = None
