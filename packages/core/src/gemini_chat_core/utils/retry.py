"""
Retry with exponential backoff.

Opt-in only: the transport wraps its send with this decorator when more than
one attempt is configured.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from datetime import datetime
from email.utils import parsedate_to_datetime
from functools import wraps
from typing import Any, TypeVar

from gemini_chat_core.core.cancellation import CancelSignal, OperationCancelled

from .errors import TransportError, report_error, to_friendly_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


def default_should_retry(error: Exception) -> bool:
    """Only rate limiting and server errors are retried."""
    return isinstance(error, TransportError) and error.is_transient


def parse_retry_after(value: str | None) -> float:
    """Seconds to wait according to a Retry-After header, 0 if unusable."""
    if not value:
        return 0
    try:
        return max(0, int(value))
    except ValueError:
        pass
    try:
        retry_after_date = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return 0
    delay_delta = retry_after_date - datetime.now(retry_after_date.tzinfo)
    return max(0, delay_delta.total_seconds())


def retry_with_backoff(
    max_attempts: int = 5,
    initial_delay_ms: int = 5000,
    max_delay_ms: int = 30000,
    should_retry: Callable[[Exception], bool] = default_should_retry,
    cancel_signal: CancelSignal | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    A decorator to retry an async function with exponential backoff and jitter.

    Backoff sleeps are raced against `cancel_signal` when one is given.
    Retry-After waits are capped at `max_delay_ms`.
    """

    async def backoff_sleep(seconds: float) -> None:
        if cancel_signal is None:
            await asyncio.sleep(seconds)
        else:
            await cancel_signal.run(asyncio.sleep(seconds))

    def decorator(
        fn: Callable[..., Awaitable[T]],
    ) -> Callable[..., Awaitable[T]]:
        @wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 0
            current_delay = initial_delay_ms
            last_error: Exception | None = None

            while attempt < max_attempts:
                attempt += 1
                try:
                    return await fn(*args, **kwargs)
                except OperationCancelled:
                    raise
                except Exception as e:
                    friendly_error = to_friendly_error(e)
                    last_error = friendly_error

                    if attempt >= max_attempts or not should_retry(
                        friendly_error
                    ):
                        break

                    retry_after_seconds = 0
                    if isinstance(friendly_error, TransportError):
                        retry_after_seconds = parse_retry_after(
                            friendly_error.details.get("retry_after")
                        )

                    if retry_after_seconds > 0:
                        retry_after_seconds = min(
                            retry_after_seconds, max_delay_ms / 1000
                        )
                        logger.warning(
                            f"Attempt {attempt} failed for {fn.__name__}. "
                            f"Honoring Retry-After header: waiting for {retry_after_seconds:.2f}s...",
                        )
                        await backoff_sleep(retry_after_seconds)
                        current_delay = initial_delay_ms
                        continue

                    jitter = current_delay * 0.3 * (random.random() * 2 - 1)
                    delay_with_jitter = max(0, current_delay + jitter)

                    logger.warning(
                        f"Attempt {attempt} failed for {fn.__name__}. Retrying in {delay_with_jitter / 1000:.2f}s...",
                    )

                    await backoff_sleep(delay_with_jitter / 1000)
                    current_delay = min(max_delay_ms, current_delay * 2)

            if last_error:
                if max_attempts > 1:
                    await report_error(
                        last_error,
                        f"Function {fn.__name__} failed after {attempt} attempts.",
                    )
                raise last_error from None
            final_error = TransportError(
                f"Function {fn.__name__} failed after {max_attempts} attempts."
            )
            await report_error(final_error, "Retry attempts exhausted.")
            raise final_error

        return wrapper

    return decorator
