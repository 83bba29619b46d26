"""
Provider wrappers for reliable-llm.

Example usage:
    from reliable_llm.core.providers import ReliableProvider

    provider = ReliableProvider(inner, max_retries=3, base_backoff_ms=250)
    reply = provider.chat_with_system(None, "Hello", "gpt-4.1-mini", 0.2)
"""

from reliable_llm.core.providers.reliable import ReliableProvider, RotationCallback

__all__ = [
    "ReliableProvider",
    "RotationCallback",
]
