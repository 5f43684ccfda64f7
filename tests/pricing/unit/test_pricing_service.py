"""
PricingService Unit Tests

Pure arithmetic, no database needed.

Run with:
    pytest tests/pricing/unit/test_pricing_service.py -v
"""

from decimal import Decimal

import pytest

from enums.discount_type import DiscountType
from models.cartItem import CartLineDTO
from models.coupon import CouponDTO
from services.pricing import PricingService


def percentage(value: str) -> CouponDTO:
    return CouponDTO(code="PCT", discount_type=DiscountType.PERCENTAGE, discount_value=Decimal(value))


def fixed(value: str) -> CouponDTO:
    return CouponDTO(code="FIX", discount_type=DiscountType.FIXED, discount_value=Decimal(value))


class TestCalculateDiscount:
    """Test PricingService.calculate_discount()"""

    def test_no_coupon_is_zero(self):
        assert PricingService.calculate_discount(Decimal("100.00"), None) == Decimal("0.00")

    def test_percentage_discount(self):
        # 100 with 20% off
        assert PricingService.calculate_discount(Decimal("100.00"), percentage("20")) == Decimal("20.00")

    def test_percentage_rounds_half_up(self):
        # 66.67 * 50 / 100 = 33.335 -> 33.34
        assert PricingService.calculate_discount(Decimal("66.67"), percentage("50")) == Decimal("33.34")

    def test_percentage_rounds_down_below_half(self):
        # 10.01 * 15 / 100 = 1.5015 -> 1.50
        assert PricingService.calculate_discount(Decimal("10.01"), percentage("15")) == Decimal("1.50")

    def test_full_percentage_discount_is_whole_subtotal(self):
        assert PricingService.calculate_discount(Decimal("49.99"), percentage("100")) == Decimal("49.99")

    def test_fixed_discount_below_subtotal(self):
        assert PricingService.calculate_discount(Decimal("60.00"), fixed("15")) == Decimal("15.00")

    def test_fixed_discount_capped_at_subtotal(self):
        # 20 off a 15.00 cart only takes 15 off
        assert PricingService.calculate_discount(Decimal("15.00"), fixed("20")) == Decimal("15.00")

    def test_discount_on_zero_subtotal(self):
        assert PricingService.calculate_discount(Decimal("0.00"), fixed("5")) == Decimal("0.00")
        assert PricingService.calculate_discount(Decimal("0.00"), percentage("50")) == Decimal("0.00")


class TestQuote:
    """Test PricingService.quote() and calculate_subtotal()"""

    @pytest.mark.parametrize("subtotal,coupon,expected_discount,expected_final", [
        ("60.00", None, "0.00", "60.00"),
        ("40.00", percentage("20"), "8.00", "32.00"),
        ("15.00", fixed("20"), "15.00", "0.00"),
        ("66.67", percentage("50"), "33.34", "33.33"),
    ])
    def test_quote(self, subtotal, coupon, expected_discount, expected_final):
        quote = PricingService.quote(Decimal(subtotal), coupon)

        assert quote.original_price == Decimal(subtotal)
        assert quote.discount_amount == Decimal(expected_discount)
        assert quote.final_price == Decimal(expected_final)

    def test_final_price_never_negative(self):
        quote = PricingService.quote(Decimal("0.01"), fixed("1000"))
        assert quote.final_price == Decimal("0.00")

    def test_quote_is_deterministic(self):
        coupon = percentage("33")
        assert PricingService.quote(Decimal("19.99"), coupon) == PricingService.quote(Decimal("19.99"), coupon)

    def test_subtotal_sums_line_prices(self):
        lines = [
            CartLineDTO(cart_item_id=1, game_id=1, title="A", price=Decimal("19.99")),
            CartLineDTO(cart_item_id=2, game_id=2, title="B", price=Decimal("20.01")),
        ]
        assert PricingService.calculate_subtotal(lines) == Decimal("40.00")

    def test_subtotal_of_no_lines(self):
        assert PricingService.calculate_subtotal([]) == Decimal("0.00")
