"""
Persistence-layer exceptions.
"""

from enums.error_kind import ErrorKind
from .base import StorefrontException


class StorageException(StorefrontException):
    """
    Raised when the transaction or connection fails for reasons unrelated to business rules.

    The enclosing transaction is always rolled back. The engine never retries;
    the original SQLAlchemy error is chained as __cause__.
    """

    kind = ErrorKind.STORAGE

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Storage failure during {operation}: {reason}",
            details={'operation': operation, 'reason': reason}
        )
        self.operation = operation
        self.reason = reason
