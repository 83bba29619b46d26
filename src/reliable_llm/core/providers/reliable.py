"""
Retrying wrapper around a chat provider.

``ReliableProvider`` implements ``ChatProvider`` itself, so it can be dropped
in wherever a plain provider is expected. Each chat call runs a small state
machine against the wrapped provider:

1. Invoke the inner operation with the caller's arguments, unmodified
2. On success, return the result unchanged
3. On failure, classify the error text:
   - 4xx other than 429/408: re-raise immediately
   - 429 with a rate-limit keyword: advance the credential rotator
   - retries left: wait ``compute_backoff(backoff, text)`` then double
     ``backoff`` (capped at 10 s) and try again
   - otherwise: re-raise the last error

A call therefore makes at most ``max_retries + 1`` inner invocations, and the
error a caller sees is always a real provider error, never a wrapper.

Per-call state (attempt index, running backoff, last error) lives in the
retry loop. Only the credential cursor is shared between calls, and it is
advanced atomically.

Example:
    provider = ReliableProvider(
        OpenAICompatibleProvider(...),
        max_retries=3,
        base_backoff_ms=500,
        api_keys=["sk-primary", "sk-secondary"],
    )
    text = provider.chat_with_system("Be terse.", "Hello", "gpt-4.1", 0.7)
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Iterable, Optional, Tuple, TypeVar

from reliable_llm.core.errors import RetryCancelledError
from reliable_llm.core.llm_provider import ChatProvider, ChatRequest, ChatResponse
from reliable_llm.core.observability import audit_log, redact_secrets
from reliable_llm.core.resilience import (
    CredentialRotator,
    RetryConfig,
    SleepFunc,
    classify_error,
    compute_backoff,
    describe_error,
    next_backoff,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Callback receiving each credential handed out after a rate-limit error.
RotationCallback = Callable[[str], None]


class ReliableProvider(ChatProvider):
    """Chat provider wrapper with retry, backoff, and credential rotation.

    Attributes:
        inner: The wrapped provider (owned; ``close`` is forwarded to it)
        config: Immutable retry configuration
        rotator: Shared round-robin credential rotator
    """

    def __init__(
        self,
        inner: ChatProvider,
        max_retries: int = 2,
        base_backoff_ms: int = 500,
        api_keys: Iterable[str] = (),
        *,
        sleep: Optional[SleepFunc] = None,
        on_rotate: Optional[RotationCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        """Initialize the wrapper.

        Args:
            inner: Provider to delegate calls to
            max_retries: Retries after the first attempt (0 = single attempt)
            base_backoff_ms: Initial wait between attempts, clamped to >= 50 ms
            api_keys: Alternate credentials to rotate through on rate limits
            sleep: Blocking sleep taking seconds (default ``time.sleep``)
            on_rotate: Called with each credential produced by a rotation
            cancel_event: When set during a backoff wait, aborts the call
                with ``RetryCancelledError``

        Raises:
            ValueError: If max_retries is negative
        """
        self._inner = inner
        self._config = RetryConfig(
            max_retries=max_retries,
            base_backoff_ms=base_backoff_ms,
            api_keys=tuple(api_keys),
        )
        self._rotator = CredentialRotator(self._config.api_keys)
        self._sleep: SleepFunc = sleep or time.sleep
        self._on_rotate = on_rotate
        self._cancel_event = cancel_event

    @classmethod
    def from_config(
        cls,
        inner: ChatProvider,
        config: RetryConfig,
        *,
        sleep: Optional[SleepFunc] = None,
        on_rotate: Optional[RotationCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> "ReliableProvider":
        """Build a wrapper from an existing ``RetryConfig``."""
        return cls(
            inner,
            max_retries=config.max_retries,
            base_backoff_ms=config.base_backoff_ms,
            api_keys=config.api_keys,
            sleep=sleep,
            on_rotate=on_rotate,
            cancel_event=cancel_event,
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def inner(self) -> ChatProvider:
        return self._inner

    @property
    def config(self) -> RetryConfig:
        return self._config

    @property
    def rotator(self) -> CredentialRotator:
        return self._rotator

    @property
    def max_retries(self) -> int:
        return self._config.max_retries

    @property
    def base_backoff_ms(self) -> int:
        return self._config.base_backoff_ms

    @property
    def api_keys(self) -> Tuple[str, ...]:
        return self._config.api_keys

    def rotate_key(self) -> Optional[str]:
        """Advance to the next alternate credential (round-robin) and return it."""
        return self._rotator.rotate()

    def compute_backoff(self, base_ms: int, error_text: str) -> int:
        """Compute a backoff duration, respecting Retry-After if present."""
        return compute_backoff(base_ms, error_text)

    # ------------------------------------------------------------------
    # ChatProvider contract
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:  # type: ignore[override]
        return self._inner.get_name()

    def get_name(self) -> str:
        return self._inner.get_name()

    def supports_native_tools(self) -> bool:
        return self._inner.supports_native_tools()

    def close(self) -> None:
        self._inner.close()

    def chat_with_system(
        self,
        system_prompt: Optional[str],
        message: str,
        model: str,
        temperature: float,
    ) -> str:
        return self._call_with_retry(
            "chat_with_system",
            lambda: self._inner.chat_with_system(system_prompt, message, model, temperature),
        )

    def chat(self, request: ChatRequest, model: str, temperature: float) -> ChatResponse:
        return self._call_with_retry(
            "chat",
            lambda: self._inner.chat(request, model, temperature),
        )

    # ------------------------------------------------------------------
    # Retry loop
    # ------------------------------------------------------------------

    def _call_with_retry(self, operation: str, func: Callable[[], T]) -> T:
        max_retries = self._config.max_retries
        backoff_ms = self._config.base_backoff_ms
        provider_name = self._inner.get_name()

        for attempt in range(max_retries + 1):
            try:
                return func()
            except Exception as exc:
                last_error = describe_error(exc)
                classification = classify_error(last_error)
                safe_error = redact_secrets(last_error)[:200]

                if not classification.retryable:
                    logger.error(
                        "Non-retryable error from %s.%s on attempt %d: %s",
                        provider_name,
                        operation,
                        attempt + 1,
                        safe_error,
                    )
                    audit_log(
                        "non_retryable",
                        provider=provider_name,
                        operation=operation,
                        attempt=attempt + 1,
                        error_message=safe_error,
                    )
                    raise

                if classification.rate_limited:
                    self._rotate_credential(provider_name)

                if attempt >= max_retries:
                    logger.error(
                        "Retries exhausted for %s.%s after %d attempts: %s",
                        provider_name,
                        operation,
                        attempt + 1,
                        safe_error,
                    )
                    audit_log(
                        "retries_exhausted",
                        provider=provider_name,
                        operation=operation,
                        attempts=attempt + 1,
                        error_message=safe_error,
                    )
                    raise

                wait_ms = compute_backoff(backoff_ms, last_error)
                logger.warning(
                    "Retryable %s error from %s.%s on attempt %d/%d; waiting %dms: %s",
                    classification.error_type.value,
                    provider_name,
                    operation,
                    attempt + 1,
                    max_retries + 1,
                    wait_ms,
                    safe_error,
                )
                audit_log(
                    "retry_attempt",
                    provider=provider_name,
                    operation=operation,
                    attempt=attempt + 1,
                    max_attempts=max_retries + 1,
                    wait_ms=wait_ms,
                    error_type=classification.error_type.value,
                    error_message=safe_error,
                )

                if self._wait(wait_ms):
                    logger.warning(
                        "Retry of %s.%s cancelled after %d attempts",
                        provider_name,
                        operation,
                        attempt + 1,
                    )
                    audit_log(
                        "retry_cancelled",
                        provider=provider_name,
                        operation=operation,
                        attempts=attempt + 1,
                    )
                    raise RetryCancelledError(
                        f"Retry of {provider_name}.{operation} cancelled after {attempt + 1} attempts",
                        provider=provider_name,
                        attempts=attempt + 1,
                        last_error=exc,
                    ) from exc

                backoff_ms = next_backoff(backoff_ms)

        raise RuntimeError("ReliableProvider: unexpected state")

    def _wait(self, wait_ms: int) -> bool:
        """Block for ``wait_ms``. Returns True if cancellation fired meanwhile."""
        seconds = wait_ms / 1000.0
        if self._cancel_event is None:
            self._sleep(seconds)
            return False
        return self._cancel_event.wait(seconds)

    def _rotate_credential(self, provider_name: str) -> None:
        credential = self._rotator.rotate()
        if credential is None:
            return

        # Providers that can switch keys in place expose set_api_key().
        set_api_key = getattr(self._inner, "set_api_key", None)
        if callable(set_api_key):
            set_api_key(credential)
        if self._on_rotate is not None:
            self._on_rotate(credential)

        logger.info(
            "Rate limited by %s; rotated to alternate credential (rotation #%d)",
            provider_name,
            self._rotator.cursor,
        )
        audit_log(
            "credential_rotation",
            provider=provider_name,
            rotation=self._rotator.cursor,
            pool_size=len(self._rotator),
        )
