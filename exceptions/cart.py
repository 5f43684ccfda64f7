"""
Cart-related exceptions.
"""

from enums.error_kind import ErrorKind
from .base import StorefrontException
from .validation import ValidationException


class CartException(StorefrontException):
    """Base exception for cart-related errors."""
    pass


class EmptyCartException(CartException):
    """Raised when trying to checkout or quote a coupon with empty cart."""

    kind = ErrorKind.BUSINESS_RULE

    def __init__(self, user_id: int):
        super().__init__(
            f"Cart is empty for user {user_id}",
            details={'user_id': user_id}
        )
        self.user_id = user_id


class CartItemNotFoundException(CartException):
    """Raised when cart item does not exist or belongs to another user."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, cart_item_id: int, user_id: int):
        super().__init__(
            f"Cart item {cart_item_id} not found for user {user_id}",
            details={'cart_item_id': cart_item_id, 'user_id': user_id}
        )
        self.cart_item_id = cart_item_id
        self.user_id = user_id


class GameAlreadyInCartException(CartException):
    """Raised when game is already in the user's cart."""

    kind = ErrorKind.CONFLICT

    def __init__(self, user_id: int, game_id: int):
        super().__init__(
            f"Game {game_id} is already in the cart of user {user_id}",
            details={'user_id': user_id, 'game_id': game_id}
        )
        self.user_id = user_id
        self.game_id = game_id


class InvalidCartQuantityException(ValidationException):
    """Raised when quantity is not 0 (remove) or 1 (keep)."""

    def __init__(self, quantity: int):
        super().__init__('quantity', f"must be 0 or 1, got {quantity}")
        self.quantity = quantity
