from sqlalchemy import select, exists
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.game import Game
from models.game_purchase import GamePurchase, GamePurchaseDTO, PurchaseHistoryEntryDTO


class GamePurchaseRepository:
    @staticmethod
    async def exists(user_id: int, game_id: int, session: Session | AsyncSession) -> bool:
        stmt = select(exists().where(GamePurchase.user_id == user_id, GamePurchase.game_id == game_id))
        result = await session_execute(stmt, session)
        return result.scalar()

    @staticmethod
    async def create(purchase_dto: GamePurchaseDTO, session: Session | AsyncSession) -> int:
        purchase = GamePurchase(**purchase_dto.model_dump(exclude_none=True))
        session.add(purchase)
        await session_flush(session)
        return purchase.id

    @staticmethod
    async def get_owned_game_ids(user_id: int, session: Session | AsyncSession) -> list[int]:
        stmt = select(GamePurchase.game_id).where(GamePurchase.user_id == user_id).order_by(GamePurchase.game_id)
        game_ids = await session_execute(stmt, session)
        return list(game_ids.scalars().all())

    @staticmethod
    async def get_history(user_id: int, session: Session | AsyncSession) -> list[PurchaseHistoryEntryDTO]:
        stmt = (select(GamePurchase.game_id,
                       Game.title,
                       GamePurchase.purchase_price,
                       GamePurchase.purchase_date)
                .join(Game, GamePurchase.game_id == Game.id)
                .where(GamePurchase.user_id == user_id)
                .order_by(GamePurchase.purchase_date.desc(), GamePurchase.id.desc()))
        rows = await session_execute(stmt, session)
        return [PurchaseHistoryEntryDTO.model_validate(row, from_attributes=True) for row in rows.all()]
