from enum import Enum


class DiscountType(str, Enum):
    """
    How a coupon's discount_value is interpreted.

    PERCENTAGE: value is a percent of the cart subtotal (0 < value <= 100)
    FIXED: value is an absolute amount, capped at the subtotal
    """
    PERCENTAGE = "percentage"
    FIXED = "fixed"
