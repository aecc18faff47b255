"""Retry Policy - which outcomes are retried and how long to wait between attempts.

Invariants:
    - Retryable: HTTP 502/503/504, timeouts, aborted requests, network-layer failures
    - Everything else that is not 2xx is TERMINAL (including 500 and all 4xx)
    - delay(k) = base_delay_ms * 2^k, capped at max_delay_ms, before the k-th retry
    - jitter_ratio == 0.0 yields exact delays; randomness is injected, never global
    - Total attempts for a policy = max_retries + 1

Design Decisions:
    - Reads retry twice, writes three times (both 1s base): defaults live in Settings
    - Pure functions: the async RetryEngine only sleeps and loops
"""

from dataclasses import dataclass
from typing import Callable

from trilingo_access.core.domain_types import OutcomeKind, TransportFailure
from trilingo_access.core.request_types import AttemptOutcome

RETRYABLE_STATUSES = frozenset({502, 503, 504})

RETRYABLE_FAILURES = frozenset({
    TransportFailure.TIMEOUT,
    TransportFailure.ABORTED,
    TransportFailure.CONNECT,
    TransportFailure.DNS,
    TransportFailure.NETWORK,
})


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff for one channel's attempts."""
    max_retries: int
    base_delay_ms: int = 1000
    max_delay_ms: int = 60_000
    jitter_ratio: float = 0.0

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must be >= 0")
        if not 0.0 <= self.jitter_ratio < 1.0:
            raise ValueError("jitter_ratio must be in [0.0, 1.0)")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


def outcome_kind(outcome: AttemptOutcome) -> OutcomeKind:
    """Classify an attempt as success, retryable failure, or terminal failure."""
    if outcome.ok:
        return OutcomeKind.SUCCESS
    if outcome.status_code in RETRYABLE_STATUSES:
        return OutcomeKind.RETRYABLE
    if outcome.failure in RETRYABLE_FAILURES:
        return OutcomeKind.RETRYABLE
    return OutcomeKind.TERMINAL


def should_retry(outcome: AttemptOutcome, policy: RetryPolicy, attempt_index: int) -> bool:
    """True if attempt `attempt_index` (0-based) failed retryably and budget remains."""
    return (
        outcome_kind(outcome) is OutcomeKind.RETRYABLE
        and attempt_index < policy.max_retries
    )


def backoff_delay_ms(
    policy: RetryPolicy,
    attempt_index: int,
    uniform: Callable[[float, float], float] | None = None,
) -> int:
    """Delay before retry number attempt_index + 1. Pass `uniform` to enable jitter."""
    delay = min(policy.max_delay_ms, (2 ** attempt_index) * policy.base_delay_ms)
    if policy.jitter_ratio and uniform is not None:
        delay = delay * uniform(1 - policy.jitter_ratio, 1 + policy.jitter_ratio)
    return int(delay)


def worst_case_backoff_ms(policy: RetryPolicy) -> int:
    """Sum of all backoff delays if every attempt fails retryably (no jitter)."""
    return sum(backoff_delay_ms(policy, k) for k in range(policy.max_retries))
