"""
Retry with exponential backoff and ordered provider fallback.

Two levels:
- retry_with_backoff: bounded retries of one operation, stopping early on
  authentication or malformed-request failures.
- retry_with_fallback: walks an ordered list of candidates (one per
  provider), giving each a short retry budget raced against a fixed
  timeout, and returns the first success with its index.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, Sequence, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from storyweaver.config import RETRY_CONSTANTS
from .errors import ProvidersExhaustedError, TransientError, is_non_retryable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryOptions:
    """Backoff settings for retry_with_backoff. Delays are in seconds."""

    max_retries: int = RETRY_CONSTANTS["max_retries"]
    initial_delay: float = RETRY_CONSTANTS["initial_delay"]
    max_delay: float = RETRY_CONSTANTS["max_delay"]
    backoff_multiplier: float = RETRY_CONSTANTS["backoff_multiplier"]


@dataclass(frozen=True)
class FallbackOptions:
    """Per-candidate retry budget and timeout for retry_with_fallback."""

    max_retries: int = RETRY_CONSTANTS["fallback_max_retries"]
    initial_delay: float = RETRY_CONSTANTS["fallback_initial_delay"]
    max_delay: float = RETRY_CONSTANTS["fallback_max_delay"]
    backoff_multiplier: float = RETRY_CONSTANTS["backoff_multiplier"]
    timeout: float = RETRY_CONSTANTS["fallback_timeout"]

    def retry_options(self) -> RetryOptions:
        return RetryOptions(
            max_retries=self.max_retries,
            initial_delay=self.initial_delay,
            max_delay=self.max_delay,
            backoff_multiplier=self.backoff_multiplier,
        )


@dataclass
class FallbackResult(Generic[T]):
    """Result of the first candidate that succeeded."""

    result: T
    provider_index: int


def _should_retry(error: BaseException) -> bool:
    # Cancellation and other BaseExceptions are never retried
    return isinstance(error, Exception) and not is_non_retryable(error)


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    options: Optional[RetryOptions] = None,
) -> T:
    """
    Await operation() up to options.max_retries times.

    The wait after the k-th failed attempt is
    min(initial_delay * backoff_multiplier ** (k - 1), max_delay).
    Authentication and malformed-request errors are re-raised immediately.
    When attempts run out the last error is re-raised.
    """
    options = options or RetryOptions()

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(1, options.max_retries)),
        wait=wait_exponential(
            multiplier=options.initial_delay,
            exp_base=options.backoff_multiplier,
            max=options.max_delay,
        ),
        retry=retry_if_exception(_should_retry),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )

    async for attempt in retrying:
        with attempt:
            result = await operation()
    return result


class _CandidateTimeout(Exception):
    """A TimeoutError raised by the candidate itself, not by the fallback timeout."""

    def __init__(self, error: BaseException):
        super().__init__(str(error))
        self.error = error


async def _run_candidate(candidate: Callable[[], Awaitable[T]], options: RetryOptions) -> T:
    try:
        return await retry_with_backoff(candidate, options)
    except asyncio.TimeoutError as e:
        raise _CandidateTimeout(e) from e


async def retry_with_fallback(
    candidates: Sequence[Callable[[], Awaitable[T]]],
    options: Optional[FallbackOptions] = None,
) -> FallbackResult[T]:
    """
    Try each candidate in order until one succeeds.

    Each candidate gets retry_with_backoff with the fallback retry budget,
    raced against options.timeout. A failed or timed-out candidate is logged
    and the next one starts immediately; a later candidate never starts
    before an earlier one has finished.

    Raises:
        ProvidersExhaustedError: every candidate failed (or there were none).
            The last candidate's error is chained as the cause.
    """
    options = options or FallbackOptions()
    retry_options = options.retry_options()
    last_error: Optional[BaseException] = None

    for index, candidate in enumerate(candidates):
        try:
            result = await asyncio.wait_for(
                _run_candidate(candidate, retry_options),
                timeout=options.timeout,
            )
            return FallbackResult(result=result, provider_index=index)
        except _CandidateTimeout as e:
            last_error = e.error
        except asyncio.TimeoutError as e:
            last_error = TransientError(
                f"Provider {index} timeout after {options.timeout:g}s",
                provider=f"candidate-{index}",
                original_error=e,
            )
        except Exception as e:
            last_error = e

        logger.warning(
            f"Provider {index} failed: {last_error}",
            extra={"provider_index": index, "error_type": type(last_error).__name__},
        )

    raise ProvidersExhaustedError(len(candidates), last_error) from last_error
