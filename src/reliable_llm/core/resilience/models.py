"""Resilience data models, enums, and protocols.

Defines the core types used across the resilience sub-package:
- ErrorType enum for error classification
- ErrorClassification for retry/rotation decisions
- RetryConfig for per-orchestrator tuning
- SleepFunc protocol for injectable blocking sleep
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, Tuple

# Floor applied to the configured base interval to avoid busy-looping.
MIN_BASE_BACKOFF_MS = 50

# Ceiling on any single wait, including server-suggested ones.
MAX_BACKOFF_MS = 30_000

# Ceiling on the self-imposed exponential growth of the running base.
MAX_GROWTH_BACKOFF_MS = 10_000


class ErrorType(str, Enum):
    """Classification of error types for resilience decisions."""

    RATE_LIMIT = "rate_limit"
    CLIENT_ERROR = "client_error"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class ErrorClassification:
    """Classification result for an error description.

    Attributes:
        retryable: False only for 4xx client errors other than 429/408
        rate_limited: True when the text looks like a 429 quota response
        retry_after_ms: Server-suggested delay, if one was found
        error_type: Coarse category for logging
    """

    retryable: bool
    rate_limited: bool = False
    retry_after_ms: Optional[int] = None
    error_type: ErrorType = ErrorType.TRANSIENT


@dataclass(frozen=True)
class RetryConfig:
    """Immutable retry configuration for one orchestrator instance.

    ``base_backoff_ms`` is clamped up to ``MIN_BASE_BACKOFF_MS`` on
    construction and ``api_keys`` is stored as a tuple.
    """

    max_retries: int = 2
    base_backoff_ms: int = 500
    api_keys: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be non-negative, got {self.max_retries}")
        from reliable_llm.core.resilience.backoff import clamp_base_backoff

        object.__setattr__(self, "base_backoff_ms", clamp_base_backoff(self.base_backoff_ms))
        object.__setattr__(self, "api_keys", tuple(self.api_keys))

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


class SleepFunc(Protocol):
    """Protocol for injectable blocking sleep (seconds)."""

    def __call__(self, seconds: float) -> None: ...
