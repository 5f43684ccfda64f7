from sqlalchemy import select, exists
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.coupon_usage import CouponUsage, CouponUsageDTO


class CouponUsageRepository:
    @staticmethod
    async def exists(user_id: int, coupon_id: int, session: Session | AsyncSession) -> bool:
        stmt = select(exists().where(CouponUsage.user_id == user_id, CouponUsage.coupon_id == coupon_id))
        result = await session_execute(stmt, session)
        return result.scalar()

    @staticmethod
    async def create(usage_dto: CouponUsageDTO, session: Session | AsyncSession) -> int:
        usage = CouponUsage(**usage_dto.model_dump(exclude_none=True))
        session.add(usage)
        await session_flush(session)
        return usage.id
