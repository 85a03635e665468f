"""
Database decorators for automatic error handling and rollback.

Provides a decorator that rolls back the session of a service or
repository method when the wrapped coroutine raises.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession


T = TypeVar("T")


def _find_session(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
    """Locate the session among call arguments or on the bound instance."""
    session = kwargs.get("session")
    if session is not None or not args:
        return session

    first = args[0]
    if isinstance(first, AsyncSession):
        return first
    return getattr(first, "session", None)


def with_rollback_on_error(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator that automatically rolls back the session on any exception.

    Usage:
        @with_rollback_on_error
        async def freeze(self, organization_id, record_id):
            ...

    The session is taken from a ``session`` keyword argument, a leading
    AsyncSession argument, or ``self.session`` of the bound instance.
    The original exception is always re-raised.

    Args:
        func: Async function to wrap

    Returns:
        Wrapped function with automatic rollback on error
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        session = _find_session(args, kwargs)

        if session is None:
            logger.warning(
                f"Function {func.__name__} decorated with @with_rollback_on_error "
                f"but no session found. Rollback will not be performed."
            )
            return await func(*args, **kwargs)

        try:
            return await func(*args, **kwargs)
        except Exception as e:
            try:
                await session.rollback()
                logger.info(
                    f"Rollback performed in {func.__name__} due to error: {type(e).__name__}"
                )
            except Exception as rollback_error:
                logger.error(
                    f"Failed to rollback in {func.__name__}: {rollback_error}",
                    exc_info=True
                )
            raise

    return wrapper
