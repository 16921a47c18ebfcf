"""Retry and backoff policy for a single endpoint."""

import random
from dataclasses import dataclass
from enum import StrEnum

from cascadefetch.core.attempt import AttemptOutcome
from cascadefetch.core.attempt import RateLimited
from cascadefetch.core.attempt import Success
from cascadefetch.core.attempt import TransportFailure


class RetryDecision(StrEnum):
    """What the cascade does after an attempt."""

    STOP = "stop"  # validated success, return it
    RETRY = "retry"  # wait, then try the same endpoint again
    ADVANCE = "advance"  # move on to the next endpoint


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for backoff between retries of the same endpoint."""

    base_delay: float = 0.5  # seconds
    jitter: float = 0.5  # seconds, uniform


def calculate_retry_delay(policy: RetryPolicy | None = None) -> float:
    """Calculate delay before retrying the same endpoint.

    Linear jittered backoff: base_delay plus uniform(0, jitter).

    Returns:
        Delay in seconds
    """
    if policy is None:
        policy = RetryPolicy()
    return policy.base_delay + random.uniform(0, policy.jitter)


def decide(outcome: AttemptOutcome, attempt: int, retries: int) -> RetryDecision:
    """Decide how to continue after an attempt.

    Args:
        outcome: Result of the attempt. A Success here has already passed
            the caller's predicate; rejected payloads arrive as
            ValidationFailure.
        attempt: Which attempt just completed (0-indexed)
        retries: Additional attempts allowed after the first

    Returns:
        RetryDecision for the cascade
    """
    match outcome:
        case Success():
            return RetryDecision.STOP
        case RateLimited():
            # Never spend retries on a throttled endpoint
            return RetryDecision.ADVANCE
        case TransportFailure(timed_out=True):
            return RetryDecision.ADVANCE

    if attempt >= retries:
        return RetryDecision.ADVANCE
    return RetryDecision.RETRY
