"""
Base exception classes for the storefront.
"""

from enums.error_kind import ErrorKind


class StorefrontException(Exception):
    """
    Base exception for all storefront errors.

    All custom exceptions in the application should inherit from this class.
    This allows catching all storefront-specific exceptions with a single handler.

    Attributes:
        kind: Error category (validation, conflict, not found, business rule, storage).
              Callers decide status codes from the kind, never from the message.
        message: Human-readable error message
        details: Optional dict with additional context (entity IDs, amounts, etc.)
    """

    kind: ErrorKind = ErrorKind.BUSINESS_RULE

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation with context."""
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"
