"""Unified error hierarchy for reliable-llm.

Usage:
    from reliable_llm.core.errors import RateLimitError, RetryCancelledError
"""

from reliable_llm.core.errors.llm import (
    AuthenticationError,
    InvalidRequestError,
    LLMError,
    ModelNotFoundError,
    RateLimitError,
    ServerError,
)
from reliable_llm.core.errors.provider import (
    ProviderError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from reliable_llm.core.errors.resilience import RetryCancelledError

__all__ = [
    # LLM
    "LLMError",
    "RateLimitError",
    "AuthenticationError",
    "InvalidRequestError",
    "ModelNotFoundError",
    "ServerError",
    # Provider
    "ProviderError",
    "ProviderUnavailableError",
    "ProviderTimeoutError",
    # Resilience
    "RetryCancelledError",
]
