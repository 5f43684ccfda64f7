from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.topup import TopupHistory, TopupHistoryDTO


class TopupRepository:
    @staticmethod
    async def create(topup_dto: TopupHistoryDTO, session: Session | AsyncSession) -> int:
        topup = TopupHistory(**topup_dto.model_dump(exclude_none=True))
        session.add(topup)
        await session_flush(session)
        return topup.id

    @staticmethod
    async def get_by_user_id(user_id: int, session: Session | AsyncSession) -> list[TopupHistoryDTO]:
        stmt = (select(TopupHistory)
                .where(TopupHistory.user_id == user_id)
                .order_by(TopupHistory.transaction_date.desc(), TopupHistory.id.desc()))
        topups = await session_execute(stmt, session)
        return [TopupHistoryDTO.model_validate(topup, from_attributes=True) for topup in topups.scalars().all()]
