"""
Error Handler Utility for the HTTP layer

Turns storefront exceptions into a status code and a JSON body:
- The status comes from the exception's kind, never from its message
- Storage failures get a generic message, details stay in the logs
- Anything that is not a StorefrontException is an unexpected 500

Usage in app.py:
    @app.exception_handler(StorefrontException)
    async def storefront_exception_handler(request, exc):
        status_code, body = handle_service_error(exc)
        return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
"""

import logging

from enums.error_kind import ErrorKind
from exceptions import StorefrontException, InsufficientBalanceException

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.BUSINESS_RULE: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.STORAGE: 500,
}

# Exceptions whose status differs from their kind's default
STATUS_OVERRIDES = {
    InsufficientBalanceException: 402,
}

GENERIC_STORAGE_MESSAGE = "The operation could not be completed, nothing was changed"
GENERIC_UNEXPECTED_MESSAGE = "Internal server error"


def get_status_code(exception: StorefrontException) -> int:
    for exception_type, status_code in STATUS_OVERRIDES.items():
        if isinstance(exception, exception_type):
            return status_code
    return STATUS_BY_KIND.get(exception.kind, 500)


def handle_service_error(exception: StorefrontException) -> tuple[int, dict]:
    """
    Convert a service exception to (status_code, body).

    Example:
        >>> handle_service_error(GameNotFoundException(42))
        (404, {'error': 'not_found', 'code': 'GameNotFoundException', 'message': 'Game 42 not found', 'details': {'game_id': 42}})
    """
    status_code = get_status_code(exception)

    if exception.kind == ErrorKind.STORAGE:
        logging.error(f"Storage error handled: {type(exception).__name__} - {str(exception)}",
                      exc_info=exception.__cause__ or exception)
        return status_code, {
            'error': exception.kind.value,
            'code': type(exception).__name__,
            'message': GENERIC_STORAGE_MESSAGE,
            'details': {},
        }

    logging.warning(f"Service error handled: {type(exception).__name__} - {str(exception)}")
    return status_code, {
        'error': exception.kind.value,
        'code': type(exception).__name__,
        'message': exception.message,
        'details': exception.details,
    }


def handle_unexpected_error(exception: Exception, correlation_id: str | None = None) -> tuple[int, dict]:
    """
    Handle exceptions that are not StorefrontException.

    The correlation id is logged with the traceback and returned to the caller
    so a support request can be matched to the log entry.
    """
    prefix = f"[{correlation_id}] " if correlation_id else ""
    logging.error(f"{prefix}Unexpected error: {type(exception).__name__} - {str(exception)}", exc_info=exception)
    return 500, {
        'error': 'internal',
        'code': type(exception).__name__,
        'message': GENERIC_UNEXPECTED_MESSAGE,
        'details': {'correlation_id': correlation_id} if correlation_id else {},
    }
