"""Resilience error classes."""

from __future__ import annotations

from typing import Optional


class RetryCancelledError(Exception):
    """The retry loop was aborted by an external cancellation signal.

    The error that triggered the interrupted wait is available both as
    ``last_error`` and as ``__cause__``.

    Attributes:
        provider: Display name of the wrapped provider.
        attempts: Number of attempts made before cancellation.
        last_error: The most recent provider error.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        attempts: int = 0,
        last_error: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.attempts = attempts
        self.last_error = last_error
