"""Bounded retry with backoff for generation calls.

Every generation flow goes through the same policy: a fixed number of
attempts, waiting ``initial_delay * attempt`` between them, and surfacing the
last attempt's error once the attempts are used up.
"""

import asyncio
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple, Type

import httpx

from ..core.config import settings
from ..core.structured_logging import LoggerFactory
from ..models.exceptions import GenerationError, OpenRouterException, RetryExhausted

logger = LoggerFactory.get_logger(__name__)

# Upstream rejections that will not change on a second attempt
NON_RETRYABLE_STATUS_CODES = (400, 401, 402, 403, 404)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_attempts: int = 3
    initial_delay: float = 1.0  # seconds, multiplied by the attempt index
    max_delay: float = 30.0  # seconds
    jitter: bool = False
    jitter_range: tuple = (0.8, 1.2)
    retryable_exceptions: Tuple[Type[BaseException], ...] = field(
        default_factory=lambda: (GenerationError, httpx.HTTPError, TimeoutError, ConnectionError)
    )
    on_retry: Optional[Callable] = None  # Callback on each retry

    @classmethod
    def from_settings(cls) -> "RetryConfig":
        return cls(
            max_attempts=max(1, settings.generation_max_attempts),
            initial_delay=settings.generation_backoff_ms / 1000.0,
        )


class RetryManager:
    """Run an async operation under a RetryConfig."""

    def __init__(self, config: Optional[RetryConfig] = None):
        self.config = config or RetryConfig.from_settings()

    def calculate_delay(self, attempt: int) -> float:
        """Delay after the given (1-based) failed attempt."""
        delay = min(self.config.initial_delay * attempt, self.config.max_delay)
        if self.config.jitter:
            jitter_min, jitter_max = self.config.jitter_range
            delay = delay * random.uniform(jitter_min, jitter_max)
        return delay

    def should_retry(self, exception: Exception, attempt: int) -> bool:
        if attempt >= self.config.max_attempts:
            return False
        if isinstance(exception, OpenRouterException) and exception.status_code in NON_RETRYABLE_STATUS_CODES:
            return False
        return isinstance(exception, self.config.retryable_exceptions)

    async def execute_with_retry(
        self,
        func: Callable,
        *args,
        operation_name: Optional[str] = None,
        flow: Optional[str] = None,
        **kwargs
    ) -> Any:
        """Await ``func(*args, **kwargs)`` until it succeeds or attempts run out."""
        operation_name = operation_name or func.__name__
        max_attempts = self.config.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                if attempt > 1:
                    logger.info(
                        f"Retry attempt {attempt}/{max_attempts} for {operation_name}",
                        operation=operation_name,
                        attempt=attempt,
                    )
                result = await func(*args, **kwargs)
                if attempt > 1:
                    logger.info(f"Operation {operation_name} succeeded after {attempt} attempts")
                return result

            except Exception as e:
                error_message = getattr(e, "message", None) or str(e) or type(e).__name__

                if attempt >= max_attempts and max_attempts > 1 and isinstance(e, self.config.retryable_exceptions):
                    logger.error(
                        f"Operation {operation_name} failed after {max_attempts} attempts",
                        operation=operation_name,
                        error=error_message,
                    )
                    raise RetryExhausted(
                        f"Failed to {operation_name} after {max_attempts} attempts. Last error: {error_message}",
                        last_exception=e,
                        flow=flow,
                    ) from e

                if not self.should_retry(e, attempt):
                    logger.warning(
                        f"Operation {operation_name} failed with non-retryable error: {error_message}",
                        operation=operation_name,
                    )
                    raise

                delay = self.calculate_delay(attempt)
                logger.warning(
                    f"Attempt {attempt} to {operation_name} failed, retrying in {delay:.2f}s: {error_message}",
                    operation=operation_name,
                    attempt=attempt,
                )
                if self.config.on_retry:
                    self.config.on_retry(attempt, delay, e)
                await asyncio.sleep(delay)

        # only reached with max_attempts < 1
        raise RetryExhausted(f"Failed to {operation_name}: no attempts were made", flow=flow)
