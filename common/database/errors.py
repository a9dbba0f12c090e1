"""
Storage error wrapping.

Collection wrappers decorate their coroutines with ``storage_call`` so that
driver failures reach callers as a single ``StorageError`` type instead of
the whole PyMongo exception tree.
"""

import functools
import logging
from typing import Any, Awaitable, Callable, TypeVar

from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StorageError(Exception):
    """A persistence call failed."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(message)


def storage_call(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Convert PyMongo failures raised by ``func`` into ``StorageError``."""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except PyMongoError as e:
            logger.error(f"Storage call {func.__qualname__} failed: {e}")
            raise StorageError(func.__qualname__, str(e)) from e

    return wrapper
