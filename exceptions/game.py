"""
Catalog and ownership exceptions.
"""

from enums.error_kind import ErrorKind
from .base import StorefrontException


class GameException(StorefrontException):
    """Base exception for game-related errors."""
    pass


class GameNotFoundException(GameException):
    """Raised when game does not exist in the catalog."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, game_id: int):
        super().__init__(
            f"Game {game_id} not found",
            details={'game_id': game_id}
        )
        self.game_id = game_id


class GameAlreadyOwnedException(GameException):
    """Raised when user already owns the game (add to cart, purchase, checkout)."""

    kind = ErrorKind.CONFLICT

    def __init__(self, user_id: int, game_id: int):
        super().__init__(
            f"User {user_id} already owns game {game_id}",
            details={'user_id': user_id, 'game_id': game_id}
        )
        self.user_id = user_id
        self.game_id = game_id
