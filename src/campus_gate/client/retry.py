"""
campus_gate.client.retry

Retry policy value object and the generic resolve-with-retry helper.

Responsibilities:
- Describe a bounded retry budget (`RetryPolicy`), independent of the task model.
- Run an async callable under that budget with tenacity, logging each retry.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from campus_gate.observability.logging import get_logger
from campus_gate.settings import Settings

log = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    # Total attempts including the first one: 2 means "retry once".
    max_attempts: int = 2
    delay: float = 0.2

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.delay < 0:
            raise ValueError("delay must be >= 0")

    @classmethod
    def from_settings(cls, settings: Settings) -> RetryPolicy:
        return cls(
            max_attempts=settings.role_retry_max_attempts,
            delay=settings.role_retry_delay_ms / 1000,
        )


def _log_retry(operation: str):
    def before_sleep(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome is not None else None
        log.warning(
            "retrying",
            operation=operation,
            attempt=state.attempt_number,
            error=str(error) if error is not None else None,
        )

    return before_sleep


async def resolve_with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    operation: str = "resolve",
) -> T:
    """
    Await `fn()` until it succeeds or the policy is exhausted. The last error is
    re-raised unchanged; errors outside `retry_on` are never retried.
    """

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_fixed(policy.delay),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_retry(operation),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            result = await fn()
    return result


# --- Module Notes -----------------------------------------------------------
# The resolver uses RetryPolicy(max_attempts=2, delay=0.2): one automatic retry
# after 200ms, then it degrades instead of looping.
