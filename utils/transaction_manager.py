import logging
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from functools import wraps
from datetime import datetime

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import config
from db import get_db_session, session_commit, session_rollback
from exceptions.storage import StorageException

logger = logging.getLogger(__name__)


class TransactionManager:
    """
    Transaction boundary for every storefront operation.

    Services receive the session and never commit; this class commits on a
    clean exit and rolls back on any exception.
    """

    # Transaction timeout in seconds
    TRANSACTION_TIMEOUT = config.TRANSACTION_TIMEOUT_SECONDS

    # Retry configuration (opt-in, see with_retry)
    MAX_RETRIES = 3
    RETRY_DELAY_BASE = 0.1  # Base delay in seconds

    @staticmethod
    @asynccontextmanager
    async def atomic_transaction(timeout: Optional[int] = None,
                                 session_factory: async_sessionmaker | None = None,
                                 operation: str = "transaction") -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for atomic database transactions.

        Usage:
            async with TransactionManager.atomic_transaction() as session:
                receipt = await CheckoutService.checkout(user_id, coupon_code, session)

        Storefront exceptions raised inside the block propagate unchanged after
        the rollback. SQLAlchemy errors (including a failed commit) are wrapped
        in StorageException.
        """
        timeout = timeout or TransactionManager.TRANSACTION_TIMEOUT
        session = None

        try:
            async with get_db_session(session_factory) as session:
                bind = session.bind
                if bind is not None and bind.dialect.name == "postgresql":
                    await session.execute(text("SET TRANSACTION ISOLATION LEVEL READ COMMITTED"))
                    await session.execute(text(f"SET LOCAL lock_timeout = '{int(timeout)}s'"))
                elif bind is not None and bind.dialect.name == "mysql":
                    await session.execute(text(f"SET SESSION innodb_lock_wait_timeout = {int(timeout)}"))
                    await session.execute(text("SET TRANSACTION ISOLATION LEVEL READ COMMITTED"))

                transaction_start = datetime.now()
                logger.debug(f"{operation} started at {transaction_start}")

                yield session

                duration = (datetime.now() - transaction_start).total_seconds()
                if duration > timeout:
                    logger.warning(f"{operation} exceeded timeout: {duration}s > {timeout}s")

                await session_commit(session)
                logger.debug(f"{operation} committed successfully in {duration:.2f}s")

        except Exception as e:
            if session:
                try:
                    await session_rollback(session)
                    logger.info(f"{operation} rolled back due to error: {str(e)}")
                except Exception as rollback_error:
                    logger.critical(f"Failed to rollback {operation}: {str(rollback_error)}")
            if isinstance(e, SQLAlchemyError):
                raise StorageException(operation, str(e.__class__.__name__)) from e
            raise

    @staticmethod
    def with_retry(max_retries: Optional[int] = None, delay_base: Optional[float] = None):
        """
        Decorator for retrying a whole unit of work on transient storage errors.

        Only StorageException caused by an OperationalError (lock timeouts,
        "database is locked") is retried. The decorated coroutine must open its
        own atomic_transaction so each attempt starts from a clean slate.
        Business errors are never retried.
        """
        max_retries = max_retries or TransactionManager.MAX_RETRIES
        delay_base = delay_base or TransactionManager.RETRY_DELAY_BASE

        def decorator(func):
            @wraps(func)
            async def wrapper(*args, **kwargs):
                last_exception = None

                for attempt in range(max_retries + 1):
                    try:
                        return await func(*args, **kwargs)
                    except StorageException as e:
                        if not isinstance(e.__cause__, OperationalError):
                            raise
                        last_exception = e

                        if attempt == max_retries:
                            logger.error(f"Function {func.__name__} failed after {max_retries} retries: {str(e)}")
                            break

                        # Exponential backoff with jitter
                        delay = delay_base * (2 ** attempt) + (delay_base * 0.1 * attempt)
                        logger.warning(f"Attempt {attempt + 1} failed for {func.__name__}, retrying in {delay:.2f}s: {str(e)}")
                        await asyncio.sleep(delay)

                raise last_exception

            return wrapper
        return decorator
