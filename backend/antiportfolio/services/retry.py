"""
Bounded retry with exponential backoff for async operations.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from ..exceptions import AntiPortfolioError, OperationFailedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    max_retries: int,
    base_delay: float = 0.5,
    operation: Optional[str] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run ``fn`` up to ``max_retries + 1`` times.

    Waits ``base_delay * 2**attempt`` seconds between attempts (no jitter).
    When every attempt fails, a domain error is re-raised unchanged and any
    other exception is wrapped in OperationFailedError naming ``operation``.
    """
    last_error: Optional[Exception] = None
    for attempt in range(max_retries + 1):
        try:
            return await fn()
        except Exception as e:
            last_error = e
            if attempt == max_retries:
                break
            delay = base_delay * (2 ** attempt)
            logger.warning(
                "%s failed (attempt %d/%d): %s; retrying in %.2fs",
                operation or "operation", attempt + 1, max_retries + 1, e, delay,
            )
            await sleep(delay)

    logger.error("%s failed after %d attempts: %s", operation or "operation", max_retries + 1, last_error)
    if isinstance(last_error, AntiPortfolioError):
        raise last_error
    raise OperationFailedError(operation, last_error) from last_error
