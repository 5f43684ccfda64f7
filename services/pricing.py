from decimal import Decimal

from enums.discount_type import DiscountType
from models.cartItem import CartLineDTO
from models.checkout import PriceQuoteDTO
from models.coupon import CouponDTO
from utils.money import round_money

ZERO = Decimal("0.00")


class PricingService:
    """Pure price arithmetic. No storage access, no side effects."""

    @staticmethod
    def calculate_subtotal(lines: list[CartLineDTO]) -> Decimal:
        return round_money(sum((line.price for line in lines), ZERO))

    @staticmethod
    def calculate_discount(subtotal: Decimal, coupon: CouponDTO | None) -> Decimal:
        """
        Discount granted by `coupon` on `subtotal`, rounded half up to cents.

        - percentage: subtotal * value / 100
        - fixed: value, capped at the subtotal

        The discount never exceeds the subtotal, so the final price stays >= 0.

        Example:
            >>> PricingService.calculate_discount(Decimal("100.00"), CouponDTO(discount_type="percentage", discount_value=Decimal("33.335")))
            Decimal('33.34')
        """
        if coupon is None:
            return ZERO
        subtotal = round_money(subtotal)
        if coupon.discount_type == DiscountType.PERCENTAGE:
            discount = round_money(subtotal * coupon.discount_value / Decimal(100))
        elif coupon.discount_type == DiscountType.FIXED:
            discount = round_money(min(coupon.discount_value, subtotal))
        else:
            raise ValueError(f"Unknown discount type: {coupon.discount_type}")
        return min(discount, subtotal)

    @staticmethod
    def quote(subtotal: Decimal, coupon: CouponDTO | None) -> PriceQuoteDTO:
        original_price = round_money(subtotal)
        discount_amount = PricingService.calculate_discount(original_price, coupon)
        final_price = max(round_money(original_price - discount_amount), ZERO)
        return PriceQuoteDTO(original_price=original_price,
                             discount_amount=discount_amount,
                             final_price=final_price)
