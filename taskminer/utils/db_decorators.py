"""
Database decorators for automatic commit, rollback and error translation.

Service methods decorated with @transactional run as one database
transaction on ``self.session``: commit on success, rollback on any error.
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from taskminer.utils.exceptions import (
    InconsistentStateError,
    TaskMinerError,
    TransientBackendError,
)


T = TypeVar("T")


def transactional(
    func: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """
    Decorator that commits the service session on success and rolls back on error.

    Usage:
        class TaskCompletionService:
            @transactional
            async def complete_task(self, user_id: str) -> ...:
                # Your database operations
                # No need to call session.commit() - it's automatic

    The decorator will:
    1. Execute the wrapped method
    2. If successful, call self.session.commit()
    3. If an exception occurs, call self.session.rollback()
    4. Translate SQLAlchemy errors: IntegrityError and OperationalError
       become TransientBackendError, any other SQLAlchemy error becomes
       InconsistentStateError
    5. Re-raise ledger errors unchanged

    Args:
        func: Async method of an object that has a ``session`` attribute

    Returns:
        Wrapped method with automatic commit/rollback
    """
    @wraps(func)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
        session = self.session

        try:
            result = await func(self, *args, **kwargs)
            await session.commit()
            logger.debug(f"Auto-commit performed in {func.__name__}")
            return result
        except BaseException as e:
            # Perform rollback, also on cancellation
            try:
                await session.rollback()
                logger.info(
                    f"Rollback performed in {func.__name__} due to error: "
                    f"{type(e).__name__}"
                )
            except Exception as rollback_error:
                logger.error(
                    f"Failed to rollback in {func.__name__}: {rollback_error}",
                    exc_info=True
                )

            if isinstance(e, InconsistentStateError):
                logger.opt(exception=e).error(
                    f"Inconsistent state in {func.__name__}",
                    extra=e.context,
                )
                raise
            if isinstance(e, TaskMinerError):
                raise
            if isinstance(e, (IntegrityError, OperationalError)):
                raise TransientBackendError(
                    operation=func.__name__, error=str(e)
                ) from e
            if isinstance(e, SQLAlchemyError):
                logger.opt(exception=e).error(
                    f"Database error in {func.__name__}"
                )
                raise InconsistentStateError(
                    operation=func.__name__, error=str(e)
                ) from e
            raise

    return wrapper
