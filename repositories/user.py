from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.user import UserDTO, User


class UserRepository:
    @staticmethod
    async def get_by_id(user_id: int, session: AsyncSession | Session, for_update: bool = False) -> UserDTO | None:
        stmt = select(User).where(User.id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        user = await session_execute(stmt, session)
        user = user.scalar()
        if user is not None:
            return UserDTO.model_validate(user, from_attributes=True)
        else:
            return user

    @staticmethod
    async def create(user_dto: UserDTO, session: Session | AsyncSession) -> int:
        user = User(**user_dto.model_dump(exclude_none=True))
        session.add(user)
        await session_flush(session)
        return user.id

    @staticmethod
    async def get_wallet(user_id: int, session: Session | AsyncSession) -> Decimal | None:
        stmt = select(User.wallet).where(User.id == user_id)
        wallet = await session_execute(stmt, session)
        return wallet.scalar()

    @staticmethod
    async def adjust_wallet(user_id: int, delta: Decimal, session: Session | AsyncSession) -> int:
        """Adds `delta` (may be negative) to the wallet. Returns the number of rows changed, 0 if the user is missing."""
        stmt = (update(User)
                .where(User.id == user_id)
                .values(wallet=User.wallet + delta))
        result = await session_execute(stmt, session)
        return result.rowcount

    @staticmethod
    async def debit_wallet(user_id: int, amount: Decimal, session: Session | AsyncSession) -> int:
        """
        Guarded debit: the balance only changes if it still covers `amount`.

        Returns the number of rows changed. 0 means the balance was too low at
        write time (or the user is gone), and the caller must abort.
        """
        stmt = (update(User)
                .where(User.id == user_id, User.wallet >= amount)
                .values(wallet=User.wallet - amount))
        result = await session_execute(stmt, session)
        return result.rowcount
