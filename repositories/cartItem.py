from sqlalchemy import select, delete, exists
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.cartItem import CartItem, CartItemDTO, CartLineDTO
from models.game import Game


class CartItemRepository:
    @staticmethod
    async def create(cart_item: CartItemDTO, session: Session | AsyncSession) -> int:
        cart_item = CartItem(**cart_item.model_dump(exclude_none=True))
        session.add(cart_item)
        await session_flush(session)
        return cart_item.id

    @staticmethod
    async def exists(user_id: int, game_id: int, session: Session | AsyncSession) -> bool:
        stmt = select(exists().where(CartItem.user_id == user_id, CartItem.game_id == game_id))
        result = await session_execute(stmt, session)
        return result.scalar()

    @staticmethod
    async def get_by_id(cart_item_id: int, user_id: int, session: Session | AsyncSession) -> CartItemDTO | None:
        stmt = select(CartItem).where(CartItem.id == cart_item_id, CartItem.user_id == user_id)
        cart_item = await session_execute(stmt, session)
        cart_item = cart_item.scalar()
        if cart_item is not None:
            return CartItemDTO.model_validate(cart_item, from_attributes=True)
        else:
            return cart_item

    @staticmethod
    async def get_lines_by_user_id(user_id: int, session: Session | AsyncSession) -> list[CartLineDTO]:
        """Cart rows joined with the catalog, priced at the game's current price."""
        stmt = (select(CartItem.id.label("cart_item_id"),
                       Game.id.label("game_id"),
                       Game.title,
                       Game.price)
                .join(Game, CartItem.game_id == Game.id)
                .where(CartItem.user_id == user_id)
                .order_by(CartItem.added_at, CartItem.id))
        rows = await session_execute(stmt, session)
        return [CartLineDTO.model_validate(row, from_attributes=True) for row in rows.all()]

    @staticmethod
    async def remove_from_cart(cart_item_id: int, user_id: int, session: Session | AsyncSession) -> int:
        stmt = delete(CartItem).where(CartItem.id == cart_item_id, CartItem.user_id == user_id)
        result = await session_execute(stmt, session)
        return result.rowcount

    @staticmethod
    async def remove_game(user_id: int, game_id: int, session: Session | AsyncSession) -> int:
        stmt = delete(CartItem).where(CartItem.user_id == user_id, CartItem.game_id == game_id)
        result = await session_execute(stmt, session)
        return result.rowcount

    @staticmethod
    async def clear(user_id: int, session: Session | AsyncSession) -> int:
        stmt = delete(CartItem).where(CartItem.user_id == user_id)
        result = await session_execute(stmt, session)
        return result.rowcount
