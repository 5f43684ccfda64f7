from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import event, Engine, Result, CursorResult
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import Session

import config
from models.base import Base

"""
Imports of these models are needed to correctly create tables in the database.
For more information see https://stackoverflow.com/questions/7478403/sqlalchemy-classes-across-files
"""
from models.user import User
from models.game import Game
from models.cartItem import CartItem
from models.coupon import Coupon
from models.coupon_usage import CouponUsage
from models.game_purchase import GamePurchase
from models.topup import TopupHistory

# HARD DISABLE SQL echo - SQL statements clutter the logs
sql_echo = False

if config.DB_URL:
    url = config.DB_URL
else:
    data_folder = Path("data")
    if data_folder.exists() is False:
        data_folder.mkdir()
    url = f"sqlite+aiosqlite:///data/{config.DB_NAME}"

engine = create_async_engine(url, echo=sql_echo)
session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

# Note: SQLAlchemy/aiosqlite logger configuration lives in utils/logging_config.py


@asynccontextmanager
async def get_db_session(factory: async_sessionmaker | None = None) -> AsyncSession:
    session = None
    try:
        async with (factory or session_maker)() as async_session:
            session = async_session
            yield session
    finally:
        if session is not None:
            await session.close()


async def session_execute(stmt, session: AsyncSession | Session) -> Result[Any] | CursorResult[Any]:
    if isinstance(session, AsyncSession):
        query_result = await session.execute(stmt)
        return query_result
    else:
        query_result = session.execute(stmt)
        return query_result


async def session_flush(session: AsyncSession | Session) -> None:
    if isinstance(session, AsyncSession):
        await session.flush()
    else:
        session.flush()


async def session_commit(session: AsyncSession | Session) -> None:
    if isinstance(session, AsyncSession):
        await session.commit()
    else:
        session.commit()


async def session_rollback(session: AsyncSession | Session) -> None:
    if isinstance(session, AsyncSession):
        await session.rollback()
    else:
        session.rollback()


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    # CouponUsage rows rely on ON DELETE CASCADE when an exhausted coupon is removed
    if "sqlite" not in type(dbapi_connection).__module__:
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


async def create_db_and_tables(target_engine=None):
    target_engine = target_engine or engine
    async with target_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
