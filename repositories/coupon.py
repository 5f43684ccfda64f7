from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.coupon import Coupon, CouponDTO


class CouponRepository:
    @staticmethod
    async def get_active_by_code(code: str, session: Session | AsyncSession, for_update: bool = False) -> CouponDTO | None:
        stmt = select(Coupon).where(Coupon.code == code, Coupon.is_active == True)
        if for_update:
            stmt = stmt.with_for_update()
        coupon = await session_execute(stmt, session)
        coupon = coupon.scalar()
        if coupon is not None:
            return CouponDTO.model_validate(coupon, from_attributes=True)
        else:
            return coupon

    @staticmethod
    async def get_by_code(code: str, session: Session | AsyncSession) -> CouponDTO | None:
        stmt = select(Coupon).where(Coupon.code == code)
        coupon = await session_execute(stmt, session)
        coupon = coupon.scalar()
        if coupon is not None:
            return CouponDTO.model_validate(coupon, from_attributes=True)
        else:
            return coupon

    @staticmethod
    async def get_by_id(coupon_id: int, session: Session | AsyncSession) -> CouponDTO | None:
        stmt = select(Coupon).where(Coupon.id == coupon_id)
        coupon = await session_execute(stmt, session)
        coupon = coupon.scalar()
        if coupon is not None:
            return CouponDTO.model_validate(coupon, from_attributes=True)
        else:
            return coupon

    @staticmethod
    async def get_all(session: Session | AsyncSession) -> list[CouponDTO]:
        stmt = select(Coupon).order_by(Coupon.created_at.desc(), Coupon.id.desc())
        coupons = await session_execute(stmt, session)
        return [CouponDTO.model_validate(coupon, from_attributes=True) for coupon in coupons.scalars().all()]

    @staticmethod
    async def create(coupon_dto: CouponDTO, session: Session | AsyncSession) -> int:
        coupon = Coupon(**coupon_dto.model_dump(exclude_none=True))
        session.add(coupon)
        await session_flush(session)
        return coupon.id

    @staticmethod
    async def set_active(coupon_id: int, is_active: bool, session: Session | AsyncSession) -> int:
        stmt = update(Coupon).where(Coupon.id == coupon_id).values(is_active=is_active)
        result = await session_execute(stmt, session)
        return result.rowcount

    @staticmethod
    async def consume_use(coupon_id: int, observed_max_uses: int, session: Session | AsyncSession) -> int:
        """
        Compare-and-set decrement of the remaining uses.

        The write only applies if max_uses still equals the value the caller
        read. When the last use is taken the row is deleted instead (usage rows
        follow through ON DELETE CASCADE). Returns the number of rows changed.
        """
        if observed_max_uses - 1 <= 0:
            stmt = delete(Coupon).where(Coupon.id == coupon_id,
                                        Coupon.max_uses == observed_max_uses)
        else:
            stmt = (update(Coupon)
                    .where(Coupon.id == coupon_id,
                           Coupon.max_uses == observed_max_uses)
                    .values(max_uses=observed_max_uses - 1,
                            uses_count=Coupon.uses_count + 1))
        result = await session_execute(stmt, session)
        return result.rowcount

    @staticmethod
    async def increment_uses_count(coupon_id: int, session: Session | AsyncSession) -> int:
        stmt = update(Coupon).where(Coupon.id == coupon_id).values(uses_count=Coupon.uses_count + 1)
        result = await session_execute(stmt, session)
        return result.rowcount
