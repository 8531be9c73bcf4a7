"""
Retry utilities for transient read failures.

Only view calls go through here. Writes are never retried: once a
transaction has been handed to the node it cannot be taken back, and a
rejected or reverted transaction will not change its mind on a second try.

Exception Handling:
- By default, retries on RetryableException and plain transport errors
- NonRetryableException and contract reverts propagate immediately
"""

import asyncio
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

from decrowdfund.shared.exceptions import RetryableException
from decrowdfund.shared.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

DEFAULT_RETRYABLE_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    RetryableException,
    ConnectionError,
    TimeoutError,
)


class RetryConfig:
    """
    Configuration class for retry behavior.

    Can be used to share retry settings across multiple operations.
    """

    def __init__(
        self,
        max_attempts: int = 1,
        base_delay: float = 0.5,
        max_delay: float = 5.0,
        exponential: bool = True,
        retryable_exceptions: Optional[Tuple[Type[Exception], ...]] = None,
    ):
        self.max_attempts = max(1, max_attempts)
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential = exponential
        self.retryable_exceptions = (
            retryable_exceptions or DEFAULT_RETRYABLE_EXCEPTIONS
        )

    def delay_for(self, attempt: int) -> float:
        """Delay before the retry following ``attempt`` (0-based)."""
        if self.exponential:
            return min(self.base_delay * (2**attempt), self.max_delay)
        return self.base_delay


async def retry_async_operation(
    operation: Callable[..., Any],
    *args: Any,
    config: Optional[RetryConfig] = None,
    operation_name: Optional[str] = None,
    **kwargs: Any,
) -> Any:
    """
    Retry an async operation with configurable backoff.

    Args:
        operation: Async function to call
        *args: Positional arguments for the operation
        config: Retry settings (defaults to a single attempt)
        operation_name: Optional name for logging
        **kwargs: Keyword arguments for the operation

    Returns:
        Result of the operation

    Example:
        count = await retry_async_operation(
            client.read, "campaignCount",
            config=RetryConfig(max_attempts=3),
        )
    """
    config = config or RetryConfig()
    name = operation_name or getattr(operation, "__name__", "operation")
    last_exception: Optional[Exception] = None

    for attempt in range(config.max_attempts):
        try:
            return await operation(*args, **kwargs)
        except config.retryable_exceptions as e:
            last_exception = e

            if attempt < config.max_attempts - 1:
                delay = config.delay_for(attempt)
                logger.warning(
                    f"Attempt {attempt + 1}/{config.max_attempts} failed for "
                    f"{name}: {e}. Retrying in {delay:.1f}s..."
                )
                await asyncio.sleep(delay)

    if last_exception:
        raise last_exception
    raise RuntimeError(
        "Unexpected state: no exception but all attempts exhausted"
    )
