"""
Coupon-related exceptions.

Resolution failures are reported in a fixed order (not found, expired,
exhausted, already used) and each maps to its own status.
"""

from datetime import datetime

from enums.error_kind import ErrorKind
from .base import StorefrontException


class CouponException(StorefrontException):
    """Base exception for coupon-related errors."""
    pass


class CouponNotFoundException(CouponException):
    """Raised when no active coupon matches the code (or the id, for admin operations)."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, code: str | None = None, coupon_id: int | None = None):
        if code is not None:
            message = f"Coupon '{code}' not found or inactive"
            details = {'code': code}
        else:
            message = f"Coupon with ID {coupon_id} not found"
            details = {'coupon_id': coupon_id}
        super().__init__(message, details)
        self.code = code
        self.coupon_id = coupon_id


class CouponExpiredException(CouponException):
    """Raised when coupon expiry date is in the past."""

    kind = ErrorKind.BUSINESS_RULE

    def __init__(self, code: str, expiry_date: datetime):
        super().__init__(
            f"Coupon '{code}' expired at {expiry_date.isoformat()}",
            details={'code': code, 'expiry_date': expiry_date}
        )
        self.code = code
        self.expiry_date = expiry_date


class CouponExhaustedException(CouponException):
    """Raised when a consumable coupon has no uses left."""

    kind = ErrorKind.BUSINESS_RULE

    def __init__(self, code: str):
        super().__init__(
            f"Coupon '{code}' has no remaining uses",
            details={'code': code}
        )
        self.code = code


class CouponAlreadyUsedException(CouponException):
    """Raised when user already redeemed this coupon."""

    kind = ErrorKind.CONFLICT

    def __init__(self, code: str, user_id: int):
        super().__init__(
            f"Coupon '{code}' was already used by user {user_id}",
            details={'code': code, 'user_id': user_id}
        )
        self.code = code
        self.user_id = user_id


class CouponAlreadyExistsException(CouponException):
    """Raised when creating a coupon whose normalized code is taken."""

    kind = ErrorKind.CONFLICT

    def __init__(self, code: str):
        super().__init__(
            f"Coupon '{code}' already exists",
            details={'code': code}
        )
        self.code = code
