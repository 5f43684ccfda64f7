import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from enums.discount_type import DiscountType
from exceptions.coupon import (
    CouponNotFoundException,
    CouponExpiredException,
    CouponExhaustedException,
    CouponAlreadyUsedException,
    CouponAlreadyExistsException,
)
from exceptions.validation import ValidationException
from models.coupon import CouponDTO
from models.coupon_usage import CouponUsageDTO
from repositories.coupon import CouponRepository
from repositories.coupon_usage import CouponUsageRepository
from utils.clock import utcnow, to_naive_utc
from utils.money import to_decimal, round_money, has_sub_cent_digits, MAX_MONEY

logger = logging.getLogger(__name__)


class CouponService:

    @staticmethod
    def normalize_code(code: str | None) -> str:
        if code is None or not str(code).strip():
            raise ValidationException('coupon_code', "is required")
        return str(code).strip().upper()

    @staticmethod
    async def resolve(code: str, user_id: int, session: AsyncSession | Session,
                      now: datetime | None = None) -> CouponDTO:
        """
        Looks up an active coupon by code and checks it is redeemable by the user.

        Checks run in a fixed order and the first failure wins:
        not found/inactive, expired, exhausted, already used by this user.
        The coupon row is locked for the rest of the transaction.

        Raises:
            ValidationException: If the code is blank
            CouponNotFoundException, CouponExpiredException,
            CouponExhaustedException, CouponAlreadyUsedException
        """
        normalized = CouponService.normalize_code(code)
        coupon = await CouponRepository.get_active_by_code(normalized, session, for_update=True)
        if coupon is None:
            raise CouponNotFoundException(code=normalized)

        now = now or utcnow()
        if coupon.expiry_date is not None and to_naive_utc(coupon.expiry_date) < now:
            raise CouponExpiredException(coupon.code, coupon.expiry_date)

        if coupon.max_uses is not None and coupon.max_uses <= 0:
            raise CouponExhaustedException(coupon.code)

        if await CouponUsageRepository.exists(user_id, coupon.id, session):
            raise CouponAlreadyUsedException(coupon.code, user_id)

        return coupon

    @staticmethod
    async def redeem(coupon: CouponDTO, user_id: int, session: AsyncSession | Session) -> int | None:
        """
        Consumes one use of a resolved coupon on behalf of `user_id`.

        Consumable coupons are decremented with a compare-and-set against the
        max_uses read by resolve(); losing that race raises CouponExhaustedException.
        The last use deletes the coupon, and no usage row is written for it.

        Returns:
            Remaining uses after redemption (None for unlimited coupons, 0 if deleted)
        """
        if coupon.is_consumable:
            changed = await CouponRepository.consume_use(coupon.id, coupon.max_uses, session)
            if changed == 0:
                logger.warning(f"Coupon {coupon.code} lost a concurrent redemption (observed max_uses={coupon.max_uses})")
                raise CouponExhaustedException(coupon.code)
            remaining = coupon.max_uses - 1
            if remaining <= 0:
                logger.info(f"Coupon {coupon.code} used up by user {user_id}, removed")
                return 0
        else:
            await CouponRepository.increment_uses_count(coupon.id, session)
            remaining = None

        try:
            await CouponUsageRepository.create(CouponUsageDTO(user_id=user_id, coupon_id=coupon.id), session)
        except IntegrityError as e:
            raise CouponAlreadyUsedException(coupon.code, user_id) from e
        return remaining

    @staticmethod
    async def create_coupon(code: str,
                            discount_type: str | DiscountType,
                            discount_value,
                            session: AsyncSession | Session,
                            expiry_date: datetime | None = None,
                            max_uses: int | None = None) -> CouponDTO:
        normalized = CouponService.normalize_code(code)

        try:
            discount_type = DiscountType(discount_type)
        except ValueError:
            raise ValidationException('discount_type', f"must be one of {[t.value for t in DiscountType]}")

        try:
            value = to_decimal(discount_value)
        except ValueError:
            raise ValidationException('discount_value', "must be a number")
        if value <= 0:
            raise ValidationException('discount_value', "must be greater than 0")
        if discount_type == DiscountType.PERCENTAGE and value > 100:
            raise ValidationException('discount_value', "percentage cannot exceed 100")
        if value > MAX_MONEY:
            raise ValidationException('discount_value', f"must not exceed {MAX_MONEY}")
        if has_sub_cent_digits(value):
            raise ValidationException('discount_value', "must have at most two decimal places")
        value = round_money(value)

        if max_uses is not None and (isinstance(max_uses, bool) or not isinstance(max_uses, int) or max_uses < 1):
            raise ValidationException('max_uses', "must be a positive integer or empty for unlimited")

        if expiry_date is not None:
            expiry_date = to_naive_utc(expiry_date)

        if await CouponRepository.get_by_code(normalized, session) is not None:
            raise CouponAlreadyExistsException(normalized)

        coupon_dto = CouponDTO(code=normalized,
                               discount_type=discount_type,
                               discount_value=value,
                               expiry_date=expiry_date,
                               is_active=True,
                               max_uses=max_uses,
                               uses_count=0)
        try:
            coupon_id = await CouponRepository.create(coupon_dto, session)
        except IntegrityError as e:
            raise CouponAlreadyExistsException(normalized) from e

        logger.info(f"Coupon {normalized} created ({discount_type.value} {value}, max_uses={max_uses})")
        return await CouponRepository.get_by_id(coupon_id, session)

    @staticmethod
    async def list_coupons(session: AsyncSession | Session) -> list[CouponDTO]:
        return await CouponRepository.get_all(session)

    @staticmethod
    async def set_coupon_active(coupon_id: int, is_active: bool, session: AsyncSession | Session) -> None:
        changed = await CouponRepository.set_active(coupon_id, is_active, session)
        if changed == 0:
            raise CouponNotFoundException(coupon_id=coupon_id)
        logger.info(f"Coupon {coupon_id} {'activated' if is_active else 'deactivated'}")
