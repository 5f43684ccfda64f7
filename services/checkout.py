import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from exceptions.game import GameNotFoundException, GameAlreadyOwnedException
from exceptions.user import UserNotFoundException, InsufficientBalanceException
from models.checkout import CheckoutReceiptDTO, CouponUsedDTO, PurchaseReceiptDTO
from models.game_purchase import GamePurchaseDTO
from repositories.cartItem import CartItemRepository
from repositories.game import GameRepository
from repositories.game_purchase import GamePurchaseRepository
from repositories.user import UserRepository
from services.cart import CartService
from services.coupon import CouponService
from services.pricing import PricingService
from utils.clock import utcnow
from utils.money import round_money

logger = logging.getLogger(__name__)


class CheckoutService:

    @staticmethod
    async def checkout(user_id: int, coupon_code: str | None, session: AsyncSession | Session) -> CheckoutReceiptDTO:
        """
        Converts the user's cart into owned games, paid from the wallet.

        Runs entirely on the caller's session and never commits: the caller's
        transaction (TransactionManager.atomic_transaction) commits on success
        and rolls everything back when any step raises.

        Steps:
            1. Load the user with a row lock
            2. Aggregate the cart at current catalog prices
            3. Compute the subtotal
            4. Resolve the coupon, if a code was given
            5. Compute the final price
            6. Check the wallet covers it
            7. Guarded wallet debit
            8. Record one purchase per game, sharing one timestamp
            9-10. Retire one coupon use and record the usage
            11. Clear the cart

        Raises:
            UserNotFoundException, EmptyCartException, CouponException subclasses,
            InsufficientBalanceException, GameAlreadyOwnedException, ValidationException
        """
        user = await UserRepository.get_by_id(user_id, session, for_update=True)
        if user is None:
            raise UserNotFoundException(user_id)

        lines = await CartService.aggregate(user_id, session)
        subtotal = PricingService.calculate_subtotal(lines)

        coupon = None
        if coupon_code:
            coupon = await CouponService.resolve(coupon_code, user_id, session)

        quote = PricingService.quote(subtotal, coupon)

        if user.wallet < quote.final_price:
            raise InsufficientBalanceException(user_id, quote.final_price, user.wallet)

        debited = await UserRepository.debit_wallet(user_id, quote.final_price, session)
        if debited == 0:
            # A concurrent debit got there first
            raise InsufficientBalanceException(user_id, quote.final_price, user.wallet)

        owned = set(await GamePurchaseRepository.get_owned_game_ids(user_id, session))
        purchase_date = utcnow()
        for line in lines:
            if line.game_id in owned:
                raise GameAlreadyOwnedException(user_id, line.game_id)
            try:
                await GamePurchaseRepository.create(GamePurchaseDTO(user_id=user_id,
                                                                    game_id=line.game_id,
                                                                    purchase_price=line.price,
                                                                    purchase_date=purchase_date), session)
            except IntegrityError as e:
                raise GameAlreadyOwnedException(user_id, line.game_id) from e

        coupon_used = None
        if coupon is not None:
            await CouponService.redeem(coupon, user_id, session)
            coupon_used = CouponUsedDTO(code=coupon.code,
                                        discount_type=coupon.discount_type,
                                        discount_value=coupon.discount_value)

        await CartItemRepository.clear(user_id, session)

        new_balance = round_money(user.wallet - quote.final_price)
        logger.info(f"🛒 Checkout for user {user_id}: {len(lines)} game(s), "
                    f"{quote.original_price} - {quote.discount_amount} = {quote.final_price}"
                    f"{f' (coupon {coupon.code})' if coupon else ''}, new balance {new_balance}")
        return CheckoutReceiptDTO(item_count=len(lines),
                                  original_price=quote.original_price,
                                  discount_amount=quote.discount_amount,
                                  final_price=quote.final_price,
                                  new_balance=new_balance,
                                  coupon_used=coupon_used)

    @staticmethod
    async def purchase_game(user_id: int, game_id: int, session: AsyncSession | Session) -> PurchaseReceiptDTO:
        """Buys a single game at its catalog price, bypassing the cart and coupons."""
        user = await UserRepository.get_by_id(user_id, session, for_update=True)
        if user is None:
            raise UserNotFoundException(user_id)

        game = await GameRepository.get_by_id(game_id, session)
        if game is None:
            raise GameNotFoundException(game_id)

        if await GamePurchaseRepository.exists(user_id, game_id, session):
            raise GameAlreadyOwnedException(user_id, game_id)

        price = round_money(game.price)
        if user.wallet < price:
            raise InsufficientBalanceException(user_id, price, user.wallet)

        debited = await UserRepository.debit_wallet(user_id, price, session)
        if debited == 0:
            raise InsufficientBalanceException(user_id, price, user.wallet)

        try:
            await GamePurchaseRepository.create(GamePurchaseDTO(user_id=user_id,
                                                                game_id=game_id,
                                                                purchase_price=price,
                                                                purchase_date=utcnow()), session)
        except IntegrityError as e:
            raise GameAlreadyOwnedException(user_id, game_id) from e

        # Owned games never stay in the cart
        await CartItemRepository.remove_game(user_id, game_id, session)

        new_balance = round_money(user.wallet - price)
        logger.info(f"🎮 User {user_id} bought game {game_id} for {price}, new balance {new_balance}")
        return PurchaseReceiptDTO(game_id=game_id, price_paid=price, new_balance=new_balance)
