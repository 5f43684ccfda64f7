# A cart row only records that a game is in the user's cart. There is no
# quantity: a game can be bought once per user, so presence is all that matters.
#
# note that the price is NOT stored here, checkout always reads the current
# catalog price
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel
from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint, func

from models.base import Base


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    game_id = Column(Integer, ForeignKey('games.id', ondelete="CASCADE"), nullable=False, index=True)
    added_at = Column(DateTime, default=func.now())

    __table_args__ = (
        UniqueConstraint('user_id', 'game_id', name='uq_cart_items_user_game'),
    )


class CartItemDTO(BaseModel):
    id: int | None = None
    user_id: int | None = None
    game_id: int | None = None
    added_at: datetime | None = None


class CartLineDTO(BaseModel):
    """Purchasable line: a cart row joined with the catalog's current price."""
    cart_item_id: int
    game_id: int
    title: str
    price: Decimal
