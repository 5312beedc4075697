"""
Bounded calls into the license store.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from django.conf import settings

from core.domain.exceptions import StoreUnavailableError
from core.metrics import store_errors_total

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_STORE_TIMEOUT_SECONDS = 5.0


def store_timeout() -> float:
    """Return the configured store call timeout in seconds."""
    return float(
        getattr(settings, "LICENSE_STORE_TIMEOUT_SECONDS", DEFAULT_STORE_TIMEOUT_SECONDS)
    )


async def call_store(
    awaitable: Awaitable[T],
    operation: str,
    timeout: Optional[float] = None,
) -> T:
    """
    Await a repository call, failing with StoreUnavailableError on timeout.

    Usage:
        license = await call_store(repository.find_by_key(key), "find_by_key")

    Args:
        awaitable: The repository coroutine
        operation: Operation name used in logs and metrics
        timeout: Seconds to wait (defaults to LICENSE_STORE_TIMEOUT_SECONDS)

    Returns:
        Whatever the repository call returns

    Raises:
        StoreUnavailableError: If the call times out or the store failed
    """
    timeout = store_timeout() if timeout is None else timeout
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        store_errors_total.labels(operation=operation).inc()
        logger.error("License store call %s timed out after %.2fs", operation, timeout)
        raise StoreUnavailableError(f"License store did not respond within {timeout:g}s")
    except StoreUnavailableError:
        store_errors_total.labels(operation=operation).inc()
        logger.error("License store call %s failed", operation, exc_info=True)
        raise
