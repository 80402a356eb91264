"""Shared helpers of the service layer."""

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from controlgap.errors import StorageError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def storage_errors(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    """Surface SQLAlchemy failures of a service call as StorageError."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.exception("Storage failure in %s", func.__name__)
            raise StorageError() from e

    return wrapper

