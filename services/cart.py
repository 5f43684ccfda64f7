import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from enums.cart_item_action import CartItemAction
from exceptions.cart import (
    EmptyCartException,
    CartItemNotFoundException,
    GameAlreadyInCartException,
    InvalidCartQuantityException,
)
from exceptions.game import GameNotFoundException, GameAlreadyOwnedException
from exceptions.user import UserNotFoundException
from models.cartItem import CartItemDTO, CartLineDTO
from models.checkout import CouponQuoteDTO
from repositories.cartItem import CartItemRepository
from repositories.game import GameRepository
from repositories.game_purchase import GamePurchaseRepository
from repositories.user import UserRepository
from services.coupon import CouponService
from services.pricing import PricingService

logger = logging.getLogger(__name__)


class CartService:

    @staticmethod
    async def add_to_cart(user_id: int, game_id: int, session: AsyncSession | Session) -> CartItemDTO:
        """
        Puts a game in the user's cart.

        Rejected before the cart table is touched when the user owns the game,
        the game does not exist or it is already in the cart. The unique
        (user_id, game_id) constraint catches the concurrent duplicate.
        """
        if await UserRepository.get_by_id(user_id, session) is None:
            raise UserNotFoundException(user_id)
        if await GamePurchaseRepository.exists(user_id, game_id, session):
            raise GameAlreadyOwnedException(user_id, game_id)
        if await GameRepository.get_by_id(game_id, session) is None:
            raise GameNotFoundException(game_id)
        if await CartItemRepository.exists(user_id, game_id, session):
            raise GameAlreadyInCartException(user_id, game_id)

        try:
            cart_item_id = await CartItemRepository.create(CartItemDTO(user_id=user_id, game_id=game_id), session)
        except IntegrityError as e:
            raise GameAlreadyInCartException(user_id, game_id) from e

        logger.info(f"Game {game_id} added to cart of user {user_id}")
        return await CartItemRepository.get_by_id(cart_item_id, user_id, session)

    @staticmethod
    async def get_cart(user_id: int, session: AsyncSession | Session) -> list[CartLineDTO]:
        return await CartItemRepository.get_lines_by_user_id(user_id, session)

    @staticmethod
    async def aggregate(user_id: int, session: AsyncSession | Session) -> list[CartLineDTO]:
        """Cart lines at current catalog prices. Raises EmptyCartException when there are none."""
        lines = await CartItemRepository.get_lines_by_user_id(user_id, session)
        if not lines:
            raise EmptyCartException(user_id)
        return lines

    @staticmethod
    async def update_cart_item(user_id: int, cart_item_id: int, quantity: int,
                               session: AsyncSession | Session) -> CartItemAction:
        # Presence flag: 0 removes the row, 1 keeps it
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity not in (0, 1):
            raise InvalidCartQuantityException(quantity)

        if quantity == 0:
            changed = await CartItemRepository.remove_from_cart(cart_item_id, user_id, session)
            if changed == 0:
                raise CartItemNotFoundException(cart_item_id, user_id)
            return CartItemAction.REMOVED

        if await CartItemRepository.get_by_id(cart_item_id, user_id, session) is None:
            raise CartItemNotFoundException(cart_item_id, user_id)
        return CartItemAction.UPDATED

    @staticmethod
    async def remove_cart_item(user_id: int, cart_item_id: int, session: AsyncSession | Session) -> None:
        changed = await CartItemRepository.remove_from_cart(cart_item_id, user_id, session)
        if changed == 0:
            raise CartItemNotFoundException(cart_item_id, user_id)
        logger.info(f"Cart item {cart_item_id} removed for user {user_id}")

    @staticmethod
    async def apply_coupon(user_id: int, coupon_code: str, session: AsyncSession | Session) -> CouponQuoteDTO:
        """
        Prices the current cart with a coupon without redeeming it.

        Nothing is written: the coupon keeps its uses and no usage is recorded.
        """
        coupon = await CouponService.resolve(coupon_code, user_id, session)
        lines = await CartService.aggregate(user_id, session)
        quote = PricingService.quote(PricingService.calculate_subtotal(lines), coupon)
        return CouponQuoteDTO(code=coupon.code,
                              discount_type=coupon.discount_type,
                              discount_value=coupon.discount_value,
                              discount_amount=quote.discount_amount,
                              original_price=quote.original_price,
                              final_price=quote.final_price,
                              remaining_uses=coupon.max_uses)
