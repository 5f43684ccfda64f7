"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import sys
import os
from datetime import datetime
from decimal import Decimal
from itertools import count

import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool, NullPool

# Set required environment variables before importing app modules
os.environ.setdefault('RUNTIME_ENVIRONMENT', 'TEST')
os.environ.setdefault('DB_URL', 'sqlite+aiosqlite:///:memory:')
os.environ.setdefault('LOG_MASK_SECRETS', 'true')

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from db import create_db_and_tables
from enums.discount_type import DiscountType
from models.base import Base
from models.cartItem import CartItemDTO
from models.coupon import CouponDTO
from models.coupon_usage import CouponUsageDTO
from models.game import GameDTO
from models.game_purchase import GamePurchaseDTO
from models.user import UserDTO
from repositories.cartItem import CartItemRepository
from repositories.coupon import CouponRepository
from repositories.coupon_usage import CouponUsageRepository
from repositories.game import GameRepository
from repositories.game_purchase import GamePurchaseRepository
from repositories.user import UserRepository


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """In-memory SQLite shared by every session of one test (StaticPool keeps a single connection)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    await create_db_and_tables(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """SQLite file with one connection per session, so transactions really run side by side."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}", poolclass=NullPool)
    await create_db_and_tables(engine)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def sync_engine():
    """Synchronous in-memory engine for repository tests (session helpers accept both kinds)."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(sync_engine):
    session = Session(sync_engine)
    yield session
    session.rollback()
    session.close()


# ============================================================================
# Seed data
# ============================================================================

class Seeder:
    """
    Creates committed rows, one short-lived session per call.

    Tests seed first, then run the code under test in its own transaction,
    then read the outcome back through a fresh session.
    """

    def __init__(self, factory: async_sessionmaker):
        self.factory = factory
        self._ids = count(1)

    async def user(self, wallet="100.00", name=None) -> int:
        n = next(self._ids)
        async with self.factory() as session:
            user_id = await UserRepository.create(UserDTO(name=name or f"Player {n}",
                                                          email=f"player{n}@example.com",
                                                          wallet=Decimal(wallet)), session)
            await session.commit()
        return user_id

    async def game(self, price="59.99", title=None) -> int:
        n = next(self._ids)
        async with self.factory() as session:
            game_id = await GameRepository.create(GameDTO(title=title or f"Game {n}",
                                                          price=Decimal(price)), session)
            await session.commit()
        return game_id

    async def coupon(self, code="SAVE10", discount_type=DiscountType.PERCENTAGE, discount_value="10",
                     max_uses: int | None = None, expiry_date: datetime | None = None,
                     is_active: bool = True) -> int:
        async with self.factory() as session:
            coupon_id = await CouponRepository.create(CouponDTO(code=code,
                                                                discount_type=discount_type,
                                                                discount_value=Decimal(discount_value),
                                                                max_uses=max_uses,
                                                                expiry_date=expiry_date,
                                                                is_active=is_active,
                                                                uses_count=0), session)
            await session.commit()
        return coupon_id

    async def cart_item(self, user_id: int, game_id: int) -> int:
        async with self.factory() as session:
            cart_item_id = await CartItemRepository.create(CartItemDTO(user_id=user_id, game_id=game_id), session)
            await session.commit()
        return cart_item_id

    async def purchase(self, user_id: int, game_id: int, price="10.00") -> int:
        async with self.factory() as session:
            purchase_id = await GamePurchaseRepository.create(GamePurchaseDTO(user_id=user_id,
                                                                              game_id=game_id,
                                                                              purchase_price=Decimal(price),
                                                                              purchase_date=datetime(2024, 1, 1)), session)
            await session.commit()
        return purchase_id

    async def usage(self, user_id: int, coupon_id: int) -> int:
        async with self.factory() as session:
            usage_id = await CouponUsageRepository.create(CouponUsageDTO(user_id=user_id, coupon_id=coupon_id), session)
            await session.commit()
        return usage_id

    # Read-back helpers

    async def wallet(self, user_id: int) -> Decimal:
        async with self.factory() as session:
            return await UserRepository.get_wallet(user_id, session)

    async def cart_lines(self, user_id: int):
        async with self.factory() as session:
            return await CartItemRepository.get_lines_by_user_id(user_id, session)

    async def owned_game_ids(self, user_id: int) -> list[int]:
        async with self.factory() as session:
            return await GamePurchaseRepository.get_owned_game_ids(user_id, session)

    async def purchase_history(self, user_id: int):
        async with self.factory() as session:
            return await GamePurchaseRepository.get_history(user_id, session)

    async def coupon_by_code(self, code: str) -> CouponDTO | None:
        async with self.factory() as session:
            return await CouponRepository.get_by_code(code, session)

    async def usage_exists(self, user_id: int, coupon_id: int) -> bool:
        async with self.factory() as session:
            return await CouponUsageRepository.exists(user_id, coupon_id, session)


@pytest_asyncio.fixture
async def seed(session_factory):
    return Seeder(session_factory)


@pytest_asyncio.fixture
async def file_seed(file_session_factory):
    return Seeder(file_session_factory)
