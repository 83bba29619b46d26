"""Resilience primitives for chat providers.

Pure, provider-agnostic building blocks used by ``ReliableProvider``:
- Error classification from textual error descriptions
- Backoff computation honoring Retry-After hints
- Round-robin credential rotation
"""

from reliable_llm.core.resilience.backoff import (
    clamp_base_backoff,
    compute_backoff,
    next_backoff,
)
from reliable_llm.core.resilience.classification import (
    classify_error,
    describe_error,
    is_non_retryable,
    is_rate_limited,
    parse_retry_after_ms,
)
from reliable_llm.core.resilience.models import (
    MAX_BACKOFF_MS,
    MAX_GROWTH_BACKOFF_MS,
    MIN_BASE_BACKOFF_MS,
    ErrorClassification,
    ErrorType,
    RetryConfig,
    SleepFunc,
)
from reliable_llm.core.resilience.rotation import CredentialRotator

__all__ = [
    # Models & enums
    "ErrorType",
    "ErrorClassification",
    "RetryConfig",
    "SleepFunc",
    "MIN_BASE_BACKOFF_MS",
    "MAX_BACKOFF_MS",
    "MAX_GROWTH_BACKOFF_MS",
    # Classification
    "is_non_retryable",
    "is_rate_limited",
    "parse_retry_after_ms",
    "describe_error",
    "classify_error",
    # Backoff
    "clamp_base_backoff",
    "compute_backoff",
    "next_backoff",
    # Rotation
    "CredentialRotator",
]
