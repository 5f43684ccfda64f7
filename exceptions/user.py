"""
User and wallet exceptions.
"""

from decimal import Decimal

from enums.error_kind import ErrorKind
from .base import StorefrontException


class UserException(StorefrontException):
    """Base exception for user-related errors."""
    pass


class UserNotFoundException(UserException):
    """Raised when user is not found in database."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, user_id: int):
        super().__init__(
            f"User with ID {user_id} not found",
            details={'user_id': user_id}
        )
        self.user_id = user_id


class InsufficientBalanceException(UserException):
    """Raised when user has insufficient wallet balance."""

    kind = ErrorKind.BUSINESS_RULE

    def __init__(self, user_id: int, required: Decimal, available: Decimal):
        super().__init__(
            f"Insufficient balance for user {user_id}: required {required}, available {available}",
            details={'user_id': user_id, 'required': required, 'available': available}
        )
        self.user_id = user_id
        self.required = required
        self.available = available
