"""
Bounded exponential-backoff retry for single upstream calls
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar
from core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: Optional[int] = None,
    base_delay: Optional[float] = None,
    growth_factor: Optional[float] = None,
    description: str = "operation"
) -> T:
    """
    Invoke an async operation, retrying every failure with backoff.

    The wait before attempt n+1 is base_delay * growth_factor ** n seconds
    (1.0s, 1.3s, 1.69s, ... with the defaults). There is no jitter, no
    delay cap and no distinction by error type. After the last attempt the
    final exception propagates unchanged.

    Args:
        operation: Zero-argument coroutine function performing one attempt
        max_attempts: Total attempts including the first (default: MAX_RETRIES)
        base_delay: Delay in seconds after the first failure
        growth_factor: Multiplier applied per attempt
        description: Label used in log messages
    """
    max_attempts = max_attempts if max_attempts is not None else settings.MAX_RETRIES
    base_delay = base_delay if base_delay is not None else settings.RETRY_BASE_DELAY
    growth_factor = growth_factor if growth_factor is not None else settings.RETRY_GROWTH_FACTOR

    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    last_exception: Optional[Exception] = None

    for attempt in range(max_attempts):
        try:
            return await operation()
        except Exception as e:
            last_exception = e
            if attempt < max_attempts - 1:
                delay = base_delay * (growth_factor ** attempt)
                logger.warning(
                    f"{description} failed (attempt {attempt + 1}/{max_attempts}). "
                    f"Retrying in {delay:.2f} seconds: {e}"
                )
                await asyncio.sleep(delay)

    logger.error(f"{description} failed after {max_attempts} attempts")
    raise last_exception
