"""Retry Engine - bounded, exponentially backed-off retries around one channel's attempts.

Invariants:
    - attempt_fn is called at most policy.max_retries + 1 times
    - Sleeps backoff_delay_ms(policy, k) before retry k + 1, never after the last attempt
    - Non-retryable outcomes return immediately; exhausted budgets return the last outcome
    - The returned outcome records how many attempts were made
    - A set cancel event aborts the pending attempt or sleep with RequestCancelledError

Design Decisions:
    - Returns outcomes instead of raising: the dispatcher decides escalation, the
      classifier decides the error (single responsibility per component)
    - sleep and uniform injected: tests assert exact delays without waiting
    - asyncio.CancelledError passes through untouched (task cancellation still works)
"""

import asyncio
import dataclasses
import logging
import random
from typing import Awaitable, Callable, TypeVar

from trilingo_access.core.boundary_protocols import Sleep
from trilingo_access.core.errors import RequestCancelledError
from trilingo_access.core.request_types import AttemptOutcome
from trilingo_access.core.retry_policy import (
    RetryPolicy, backoff_delay_ms, should_retry,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

AttemptFn = Callable[[], Awaitable[AttemptOutcome]]


class RetryEngine:
    """Executes attempt functions under a RetryPolicy."""

    def __init__(
        self,
        sleep: Sleep = asyncio.sleep,
        uniform: Callable[[float, float], float] = random.uniform,
    ):
        self._sleep = sleep
        self._uniform = uniform

    async def execute(
        self,
        attempt_fn: AttemptFn,
        policy: RetryPolicy,
        *,
        endpoint: str = "",
        cancel: asyncio.Event | None = None,
    ) -> AttemptOutcome:
        """Run attempt_fn until success, terminal failure, or budget exhaustion."""
        attempt = 0
        while True:
            _raise_if_cancelled(cancel, endpoint)
            outcome = await _race(attempt_fn(), cancel, endpoint)

            if not should_retry(outcome, policy, attempt):
                return dataclasses.replace(outcome, attempts=attempt + 1)

            delay = backoff_delay_ms(policy, attempt, self._uniform)
            logger.warning(
                f"Retry attempt {attempt + 1}/{policy.max_retries} after {delay}ms "
                f"for {endpoint} (status {outcome.status_code}, "
                f"failure {outcome.failure.value if outcome.failure else None})",
                extra={
                    "endpoint": endpoint,
                    "channel": outcome.channel.value,
                    "attempt": attempt + 1,
                    "max_attempts": policy.max_attempts,
                    "status_code": outcome.status_code,
                    "delay_ms": delay,
                },
            )
            await _race(self._sleep(delay / 1000), cancel, endpoint)
            attempt += 1


def _raise_if_cancelled(cancel: asyncio.Event | None, endpoint: str) -> None:
    if cancel is not None and cancel.is_set():
        raise RequestCancelledError(endpoint)


async def _race(aw: Awaitable[T], cancel: asyncio.Event | None, endpoint: str) -> T:
    """Await `aw` unless `cancel` fires first; then cancel `aw` and raise."""
    if cancel is None:
        return await aw

    work = asyncio.ensure_future(aw)
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        work.cancel()
        waiter.cancel()
        raise

    if work.done():
        waiter.cancel()
        return work.result()

    work.cancel()
    try:
        await work
    except asyncio.CancelledError:
        pass
    logger.info(f"Request to {endpoint} cancelled by caller", extra={"endpoint": endpoint})
    raise RequestCancelledError(endpoint)
