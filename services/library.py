from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from models.game_purchase import PurchaseHistoryEntryDTO
from repositories.game_purchase import GamePurchaseRepository


class LibraryService:
    """Read views over the games a user owns."""

    @staticmethod
    async def get_owned_game_ids(user_id: int, session: AsyncSession | Session) -> list[int]:
        return await GamePurchaseRepository.get_owned_game_ids(user_id, session)

    @staticmethod
    async def get_purchase_history(user_id: int, session: AsyncSession | Session) -> list[PurchaseHistoryEntryDTO]:
        return await GamePurchaseRepository.get_history(user_id, session)
