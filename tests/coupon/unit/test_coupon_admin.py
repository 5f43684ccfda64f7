"""
Unit Tests: coupon administration (create, list, activate/deactivate)
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from enums.discount_type import DiscountType
from exceptions import (
    CouponAlreadyExistsException,
    CouponNotFoundException,
    ValidationException,
)
from services.coupon import CouponService
from utils.transaction_manager import TransactionManager


async def create(session_factory, **kwargs):
    params = dict(code="WELCOME", discount_type="percentage", discount_value="15")
    params.update(kwargs)
    async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
        return await CouponService.create_coupon(params.pop("code"), params.pop("discount_type"),
                                                 params.pop("discount_value"), session, **params)


class TestCreateCoupon:

    @pytest.mark.asyncio
    async def test_creates_uppercase_active_coupon(self, session_factory):
        coupon = await create(session_factory, code="welcome", max_uses=5)

        assert coupon.id is not None
        assert coupon.code == "WELCOME"
        assert coupon.discount_type == DiscountType.PERCENTAGE
        assert coupon.discount_value == Decimal("15.00")
        assert coupon.is_active is True
        assert coupon.max_uses == 5
        assert coupon.uses_count == 0

    @pytest.mark.asyncio
    async def test_aware_expiry_is_stored_as_utc(self, session_factory):
        expiry = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)

        coupon = await create(session_factory, expiry_date=expiry)

        assert coupon.expiry_date == datetime(2030, 1, 1, 12, 0)

    @pytest.mark.asyncio
    async def test_duplicate_code_is_conflict(self, session_factory):
        await create(session_factory, code="DUP")

        with pytest.raises(CouponAlreadyExistsException):
            await create(session_factory, code="dup")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides,field", [
        ({"code": "  "}, "coupon_code"),
        ({"discount_type": "bogus"}, "discount_type"),
        ({"discount_value": "abc"}, "discount_value"),
        ({"discount_value": "0"}, "discount_value"),
        ({"discount_value": "-5"}, "discount_value"),
        ({"discount_value": "100.01"}, "discount_value"),
        ({"discount_value": "12.345"}, "discount_value"),
        ({"discount_type": "fixed", "discount_value": "5.001"}, "discount_value"),
        ({"discount_type": "fixed", "discount_value": "1e20"}, "discount_value"),
        ({"max_uses": 0}, "max_uses"),
        ({"max_uses": -1}, "max_uses"),
        ({"max_uses": True}, "max_uses"),
    ])
    async def test_invalid_input(self, session_factory, overrides, field):
        with pytest.raises(ValidationException) as exc_info:
            await create(session_factory, **overrides)
        assert exc_info.value.field == field

    @pytest.mark.asyncio
    async def test_fixed_coupon_may_exceed_100(self, session_factory):
        coupon = await create(session_factory, code="BIG", discount_type="fixed", discount_value="150")
        assert coupon.discount_value == Decimal("150.00")


class TestCouponStatus:

    @pytest.mark.asyncio
    async def test_list_and_deactivate(self, session_factory):
        first = await create(session_factory, code="FIRST")
        await create(session_factory, code="SECOND")

        async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
            await CouponService.set_coupon_active(first.id, False, session)

        async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
            coupons = await CouponService.list_coupons(session)

        by_code = {coupon.code: coupon for coupon in coupons}
        assert set(by_code) == {"FIRST", "SECOND"}
        assert by_code["FIRST"].is_active is False
        assert by_code["SECOND"].is_active is True

    @pytest.mark.asyncio
    async def test_unknown_coupon_id(self, session_factory):
        with pytest.raises(CouponNotFoundException) as exc_info:
            async with TransactionManager.atomic_transaction(session_factory=session_factory) as session:
                await CouponService.set_coupon_active(404, True, session)
        assert exc_info.value.coupon_id == 404
