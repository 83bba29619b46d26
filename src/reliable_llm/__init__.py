"""
reliable-llm: a resilience layer for chat-completion providers.

Wrap any ``ChatProvider`` in ``ReliableProvider`` to retry transient
failures with backoff, honor Retry-After hints, rotate credentials on rate
limits, and fail fast on client errors.
"""

from reliable_llm.core.errors import RetryCancelledError
from reliable_llm.core.llm_provider import (
    ChatMessage,
    ChatProvider,
    ChatRequest,
    ChatResponse,
    ChatRole,
)
from reliable_llm.core.providers import ReliableProvider
from reliable_llm.core.resilience import RetryConfig

__version__ = "0.1.0"

__all__ = [
    "ChatMessage",
    "ChatProvider",
    "ChatRequest",
    "ChatResponse",
    "ChatRole",
    "ReliableProvider",
    "RetryCancelledError",
    "RetryConfig",
]
