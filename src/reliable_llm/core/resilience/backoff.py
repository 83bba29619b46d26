"""Backoff computation for the retry loop.

Two independent ceilings apply:

- the running base interval doubles after each failed attempt but stops
  growing at ``MAX_GROWTH_BACKOFF_MS`` (10 s)
- a server-suggested Retry-After delay is honored up to ``MAX_BACKOFF_MS``
  (30 s), and is never allowed to undercut the running base
"""

from reliable_llm.core.resilience.classification import parse_retry_after_ms
from reliable_llm.core.resilience.models import (
    MAX_BACKOFF_MS,
    MAX_GROWTH_BACKOFF_MS,
    MIN_BASE_BACKOFF_MS,
)


def clamp_base_backoff(base_ms: int) -> int:
    """Apply the minimum base interval."""
    return max(int(base_ms), MIN_BASE_BACKOFF_MS)


def compute_backoff(base_ms: int, error_text: str) -> int:
    """Compute the wait before the next attempt, in milliseconds.

    Args:
        base_ms: The current running base interval
        error_text: Description of the error that ended the last attempt

    Returns:
        ``clamp(retry_after, base_ms, MAX_BACKOFF_MS)`` when the text carries
        a Retry-After hint, otherwise ``base_ms``
    """
    retry_after = parse_retry_after_ms(error_text)
    if retry_after is None:
        return base_ms
    return max(min(retry_after, MAX_BACKOFF_MS), base_ms)


def next_backoff(current_ms: int) -> int:
    """Double the running base interval, capped at ``MAX_GROWTH_BACKOFF_MS``."""
    return min(current_ms * 2, MAX_GROWTH_BACKOFF_MS)
