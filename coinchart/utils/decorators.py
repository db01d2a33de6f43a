import asyncio
import functools
import logging
import socket
from dataclasses import dataclass
from typing import Any, Optional

import aiohttp

from coinchart.contracts.errors import NetworkFailure

# -------------------------------------------------------------
# Bounded retry for transport failures. Status and payload
# errors are never retried; asyncio.CancelledError is a
# BaseException and passes straight through.
# -------------------------------------------------------------

_RATE_LIMIT_PHRASES = {'too many requests', 'rate limit', '429', 'ratelimit'}

_NETWORK_EXCEPTIONS = (
    NetworkFailure, TimeoutError, asyncio.TimeoutError, ConnectionResetError,
    aiohttp.ClientConnectionError, socket.gaierror,
)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Backoff settings for retry_async. max_retries is always finite."""
    max_retries: int = 2
    initial_delay: float = 1.0
    backoff_factor: float = 2.0
    max_delay: float = 10.0

    @classmethod
    def from_config(cls, config: Any) -> "RetryPolicy":
        return cls(
            max_retries=max(0, int(config.MAX_RETRIES)),
            initial_delay=float(config.RETRY_INITIAL_DELAY),
            backoff_factor=float(config.RETRY_BACKOFF_FACTOR),
            max_delay=float(config.RETRY_MAX_DELAY),
        )


def _log(logger, level: str, message: str):
    log_func = getattr(logger, level) if logger else getattr(logging, level)
    log_func(message)


def _classify_retryable_error(e: BaseException) -> str:
    msg = str(e).lower()
    if any(p in msg for p in _RATE_LIMIT_PHRASES):
        return "Rate limit. Retry {}"
    if isinstance(e, (TimeoutError, asyncio.TimeoutError)) or getattr(e, 'timed_out', False) or 'timeout' in msg:
        return "Timeout. Retry {}"
    if isinstance(e, (aiohttp.ClientConnectionError, socket.gaierror, ConnectionResetError)):
        return "Network issue. Retry {}"
    return "Retry {}"


def retry_async(policy: Optional[RetryPolicy] = None):
    """Retry decorator for async instance methods that may fail at the transport level.

    Args:
        policy: Explicit backoff settings. When omitted the instance's
            ``retry_policy`` attribute is used, falling back to RetryPolicy().
    """
    def decorator(func: Any):
        @functools.wraps(func)
        async def wrapper(self, *args: Any, **kwargs: Any):
            effective = policy or getattr(self, 'retry_policy', None) or RetryPolicy()
            context = _RetryContext(self, func, effective)

            while True:  # Controlled exit via return or raise
                try:
                    return await func(self, *args, **kwargs)
                except _NETWORK_EXCEPTIONS as e:
                    if not await context.handle_network_error(e):
                        raise
        return wrapper
    return decorator


class _RetryContext:
    """Tracks attempts and delay for one decorated call."""

    def __init__(self, instance, func, policy: RetryPolicy):
        self.logger = getattr(instance, 'logger', None)
        self.class_name = instance.__class__.__name__
        self.func_name = func.__name__
        self.policy = policy
        self.attempt = 0
        self.delay = policy.initial_delay

    def _should_continue_retrying(self) -> bool:
        self.attempt += 1
        return self.attempt <= self.policy.max_retries

    async def handle_network_error(self, error: BaseException) -> bool:
        """Sleep and return True when another attempt is allowed."""
        if not self._should_continue_retrying():
            if self.policy.max_retries:
                _log(self.logger, 'error',
                     f"Function {self.class_name}.{self.func_name} failed after {self.policy.max_retries} retries. "
                     f"Last error: {type(error).__name__} - {error}")
            return False

        template = _classify_retryable_error(error)
        _log(self.logger, 'warning',
             f"{template.format(self.attempt)} for {self.class_name}.{self.func_name} "
             f"in {self.delay:.2f} seconds. Type: {type(error).__name__}, Error: {error}")

        await asyncio.sleep(self.delay)
        self.delay = min(self.delay * self.policy.backoff_factor, self.policy.max_delay)
        return True
