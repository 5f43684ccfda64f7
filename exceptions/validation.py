"""
Input validation exceptions.
"""

from enums.error_kind import ErrorKind
from .base import StorefrontException


class ValidationException(StorefrontException):
    """Raised when input is malformed or missing. Nothing has been mutated."""

    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Invalid {field}: {reason}",
            details={'field': field, 'reason': reason}
        )
        self.field = field
        self.reason = reason
