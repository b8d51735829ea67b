"""
Timeout and error translation for MongoDB round-trips.

Every repository call goes through ``store_call`` so that a hung or failed
round-trip surfaces as a retryable ``StoreUnavailableError`` instead of
stalling the request.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from pymongo.errors import PyMongoError

from clinicbook.core.config import get_settings
from clinicbook.core.exceptions import StoreUnavailableError

logger = logging.getLogger("clinicbook.store")

T = TypeVar("T")


def default_timeout() -> float:
    return get_settings().database.operation_timeout_seconds


async def store_call(operation: str, awaitable: Awaitable[T], timeout: Optional[float] = None) -> T:
    """Await ``awaitable`` with a deadline, translating store failures."""
    limit = timeout if timeout is not None else default_timeout()
    try:
        return await asyncio.wait_for(awaitable, timeout=limit)
    except asyncio.TimeoutError:
        logger.error("Store operation %s timed out after %.1fs", operation, limit)
        raise StoreUnavailableError(operation, details={"timeout_seconds": limit})
    except PyMongoError as e:
        logger.error("Store operation %s failed: %s", operation, e, exc_info=True)
        raise StoreUnavailableError(operation, details={"error_type": type(e).__name__})
