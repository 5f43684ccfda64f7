"""
Unit Tests: CartService

Covers:
- add_to_cart() - rejection order and the unique (user, game) backstop
- update_cart_item() / remove_cart_item() - presence-flag semantics
- apply_coupon() - read-only quote
"""

from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from enums.cart_item_action import CartItemAction
from enums.discount_type import DiscountType
from exceptions import (
    UserNotFoundException,
    GameNotFoundException,
    GameAlreadyOwnedException,
    GameAlreadyInCartException,
    CartItemNotFoundException,
    InvalidCartQuantityException,
    EmptyCartException,
    CouponNotFoundException,
    CouponExpiredException,
)
from models.game import GameDTO
from models.user import UserDTO
from services.cart import CartService
from utils.transaction_manager import TransactionManager


class TestAddToCart:

    @pytest.mark.asyncio
    async def test_adds_game(self, session_factory, seed):
        user_id = await seed.user()
        game_id = await seed.game(price="29.99", title="Hollow Depths")

        async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
            cart_item = await CartService.add_to_cart(user_id, game_id, session)

        assert cart_item.user_id == user_id
        assert cart_item.game_id == game_id
        lines = await seed.cart_lines(user_id)
        assert [(line.cart_item_id, line.title, line.price) for line in lines] == [
            (cart_item.id, "Hollow Depths", Decimal("29.99"))
        ]

    @pytest.mark.asyncio
    async def test_owned_game_rejected_first(self, session_factory, seed):
        user_id = await seed.user()
        game_id = await seed.game()
        await seed.purchase(user_id, game_id)

        with pytest.raises(GameAlreadyOwnedException):
            async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
                await CartService.add_to_cart(user_id, game_id, session)
        assert await seed.cart_lines(user_id) == []

    @pytest.mark.asyncio
    async def test_unknown_game(self, session_factory, seed):
        user_id = await seed.user()

        with pytest.raises(GameNotFoundException):
            async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
                await CartService.add_to_cart(user_id, 12345, session)

    @pytest.mark.asyncio
    async def test_unknown_user(self, session_factory, seed):
        game_id = await seed.game()

        with pytest.raises(UserNotFoundException):
            async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
                await CartService.add_to_cart(999, game_id, session)

    @pytest.mark.asyncio
    async def test_duplicate_rejected(self, session_factory, seed):
        user_id = await seed.user()
        game_id = await seed.game()
        await seed.cart_item(user_id, game_id)

        with pytest.raises(GameAlreadyInCartException):
            async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
                await CartService.add_to_cart(user_id, game_id, session)
        assert len(await seed.cart_lines(user_id)) == 1

    @pytest.mark.asyncio
    async def test_integrity_error_reported_as_already_in_cart(self):
        """A concurrent insert that slips past the existence check hits the unique constraint."""
        session = AsyncMock()
        with patch('services.cart.UserRepository.get_by_id', AsyncMock(return_value=UserDTO(id=1))), \
             patch('services.cart.GamePurchaseRepository.exists', AsyncMock(return_value=False)), \
             patch('services.cart.GameRepository.get_by_id', AsyncMock(return_value=GameDTO(id=2))), \
             patch('services.cart.CartItemRepository.exists', AsyncMock(return_value=False)), \
             patch('services.cart.CartItemRepository.create',
                   AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")))):
            with pytest.raises(GameAlreadyInCartException) as exc_info:
                await CartService.add_to_cart(1, 2, session)

        assert isinstance(exc_info.value.__cause__, IntegrityError)


class TestUpdateCartItem:

    @pytest.mark.asyncio
    async def test_quantity_one_keeps_row(self, session_factory, seed):
        user_id = await seed.user()
        game_id = await seed.game()
        cart_item_id = await seed.cart_item(user_id, game_id)

        async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
            action = await CartService.update_cart_item(user_id, cart_item_id, 1, session)

        assert action == CartItemAction.UPDATED
        assert len(await seed.cart_lines(user_id)) == 1

    @pytest.mark.asyncio
    async def test_quantity_zero_removes_row(self, session_factory, seed):
        user_id = await seed.user()
        game_id = await seed.game()
        cart_item_id = await seed.cart_item(user_id, game_id)

        async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
            action = await CartService.update_cart_item(user_id, cart_item_id, 0, session)

        assert action == CartItemAction.REMOVED
        assert await seed.cart_lines(user_id) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [2, 10, -1, True])
    async def test_invalid_quantity(self, session_factory, seed, quantity):
        user_id = await seed.user()
        game_id = await seed.game()
        cart_item_id = await seed.cart_item(user_id, game_id)

        with pytest.raises(InvalidCartQuantityException):
            async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
                await CartService.update_cart_item(user_id, cart_item_id, quantity, session)
        assert len(await seed.cart_lines(user_id)) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, 1])
    async def test_other_users_item_is_not_found(self, session_factory, seed, quantity):
        owner = await seed.user()
        intruder = await seed.user()
        game_id = await seed.game()
        cart_item_id = await seed.cart_item(owner, game_id)

        with pytest.raises(CartItemNotFoundException):
            async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
                await CartService.update_cart_item(intruder, cart_item_id, quantity, session)
        assert len(await seed.cart_lines(owner)) == 1


class TestRemoveCartItem:

    @pytest.mark.asyncio
    async def test_removes_own_item(self, session_factory, seed):
        user_id = await seed.user()
        kept = await seed.game()
        removed = await seed.game()
        await seed.cart_item(user_id, kept)
        cart_item_id = await seed.cart_item(user_id, removed)

        async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
            await CartService.remove_cart_item(user_id, cart_item_id, session)

        assert [line.game_id for line in await seed.cart_lines(user_id)] == [kept]

    @pytest.mark.asyncio
    async def test_missing_item(self, session_factory, seed):
        user_id = await seed.user()

        with pytest.raises(CartItemNotFoundException):
            async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
                await CartService.remove_cart_item(user_id, 77, session)


class TestApplyCoupon:

    @pytest.mark.asyncio
    async def test_quote_is_read_only_and_repeatable(self, session_factory, seed):
        user_id = await seed.user(wallet="5.00")
        first = await seed.game(price="30.00")
        second = await seed.game(price="10.00")
        await seed.cart_item(user_id, first)
        await seed.cart_item(user_id, second)
        await seed.coupon(code="QUARTER", discount_type=DiscountType.PERCENTAGE, discount_value="25", max_uses=1)

        quotes = []
        for _ in range(2):
            async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
                quotes.append(await CartService.apply_coupon(user_id, "quarter", session))

        assert quotes[0] == quotes[1]
        quote = quotes[0]
        assert quote.code == "QUARTER"
        assert quote.original_price == Decimal("40.00")
        assert quote.discount_amount == Decimal("10.00")
        assert quote.final_price == Decimal("30.00")
        assert quote.remaining_uses == 1

        # Nothing was consumed
        coupon = await seed.coupon_by_code("QUARTER")
        assert coupon.max_uses == 1
        assert await seed.usage_exists(user_id, coupon.id) is False
        assert await seed.wallet(user_id) == Decimal("5.00")

    @pytest.mark.asyncio
    async def test_coupon_checked_before_cart(self, session_factory, seed):
        user_id = await seed.user()

        with pytest.raises(CouponNotFoundException):
            async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
                await CartService.apply_coupon(user_id, "MISSING", session)

    @pytest.mark.asyncio
    async def test_empty_cart(self, session_factory, seed):
        user_id = await seed.user()
        await seed.coupon(code="VALID")

        with pytest.raises(EmptyCartException):
            async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
                await CartService.apply_coupon(user_id, "VALID", session)

    @pytest.mark.asyncio
    async def test_expired_coupon(self, session_factory, seed):
        from datetime import timedelta
        from utils.clock import utcnow

        user_id = await seed.user()
        game_id = await seed.game()
        await seed.cart_item(user_id, game_id)
        await seed.coupon(code="STALE", expiry_date=utcnow() - timedelta(seconds=5))

        with pytest.raises(CouponExpiredException):
            async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
                await CartService.apply_coupon(user_id, "STALE", session)
