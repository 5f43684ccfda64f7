from decimal import Decimal

from pydantic import BaseModel

from enums.discount_type import DiscountType


class PriceQuoteDTO(BaseModel):
    original_price: Decimal
    discount_amount: Decimal
    final_price: Decimal


class CouponQuoteDTO(BaseModel):
    """Result of applying a coupon to the current cart without redeeming it."""
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    discount_amount: Decimal
    original_price: Decimal
    final_price: Decimal
    remaining_uses: int | None = None


class CouponUsedDTO(BaseModel):
    code: str
    discount_type: DiscountType
    discount_value: Decimal


class CheckoutReceiptDTO(BaseModel):
    item_count: int
    original_price: Decimal
    discount_amount: Decimal
    final_price: Decimal
    new_balance: Decimal
    coupon_used: CouponUsedDTO | None = None


class PurchaseReceiptDTO(BaseModel):
    game_id: int
    price_paid: Decimal
    new_balance: Decimal
