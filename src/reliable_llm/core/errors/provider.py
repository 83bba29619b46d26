"""Provider orchestration error classes.

Transport-level failures that never produced an HTTP response still map to
the status code a gateway would report, so the textual classifier treats
them the same way as the equivalent upstream response.
"""

from typing import Optional


class ProviderError(RuntimeError):
    """Base exception for provider orchestration errors.

    Attributes:
        provider: Provider that raised the error
        retryable: Whether the operation can be retried
        status_code: Equivalent HTTP status code, if any
    """

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        retryable: bool = False,
        status_code: Optional[int] = None,
    ):
        self.provider = provider
        self.retryable = retryable
        self.status_code = status_code
        super().__init__(message)


class ProviderUnavailableError(ProviderError):
    """Raised when a provider cannot be reached (connection refused, DNS, reset).

    Reported as 503 and always retryable.
    """

    def __init__(
        self,
        message: str = "Service Unavailable",
        *,
        provider: Optional[str] = None,
    ):
        super().__init__(message, provider=provider, retryable=True, status_code=503)


class ProviderTimeoutError(ProviderError):
    """Raised when a provider exceeds its allotted execution time.

    Reported as 408 and always retryable.

    Attributes:
        provider: Provider that timed out
        elapsed: Actual elapsed time in seconds before timeout
        timeout: Configured timeout value in seconds
    """

    def __init__(
        self,
        message: str = "Request Timeout",
        *,
        provider: Optional[str] = None,
        elapsed: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(message, provider=provider, retryable=True, status_code=408)
        self.elapsed = elapsed
        self.timeout = timeout
