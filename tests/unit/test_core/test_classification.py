"""Tests for textual error classification."""

import pytest

from reliable_llm.core.errors import (
    AuthenticationError,
    ModelNotFoundError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    RateLimitError,
    ServerError,
)
from reliable_llm.core.resilience import (
    ErrorType,
    classify_error,
    describe_error,
    is_non_retryable,
    is_rate_limited,
    parse_retry_after_ms,
)


class TestIsNonRetryable:
    """Tests for is_non_retryable."""

    @pytest.mark.parametrize(
        "text",
        [
            "400 Bad Request",
            "401 Unauthorized",
            "403 Forbidden",
            "404 Not Found",
            "422 Unprocessable Entity",
            "Error: got 401 from upstream API",
        ],
    )
    def test_client_errors_are_non_retryable(self, text):
        """4xx codes other than 429/408 are not retryable."""
        assert is_non_retryable(text) is True

    @pytest.mark.parametrize(
        "text",
        [
            "429 Too Many Requests",
            "408 Request Timeout",
            "500 Internal Server Error",
            "502 Bad Gateway",
            "503 Service Unavailable",
            "504 Gateway Timeout",
            "Server returned 500 error",
            "timeout",
            "connection reset",
            "",
        ],
    )
    def test_retryable_texts(self, text):
        """429, 408, 5xx and codeless errors are retryable."""
        assert is_non_retryable(text) is False

    def test_longer_digit_runs_are_not_status_codes(self):
        """A 4-digit run containing 401 is skipped whole."""
        assert is_non_retryable("request id 4011 failed") is False
        assert is_non_retryable("port 14040 refused") is False

    def test_two_digit_runs_ignored(self):
        """Two-digit numbers are not status codes."""
        assert is_non_retryable("retry in 40 seconds") is False

    def test_non_client_code_does_not_stop_scan(self):
        """A 2xx/5xx code earlier in the text does not hide a later 4xx."""
        assert is_non_retryable("upstream 200 then 404 not found") is True
        assert is_non_retryable("502 from proxy, origin said 403") is True

    def test_first_client_code_wins(self):
        """The first 4xx decides, even if a later one would differ."""
        assert is_non_retryable("429 after 401") is False
        assert is_non_retryable("401 after 429") is True


class TestIsRateLimited:
    """Tests for is_rate_limited."""

    @pytest.mark.parametrize(
        "text",
        [
            "429 Too Many Requests",
            "HTTP 429 rate limit exceeded",
            "429 rate exceeded",
            "429 limit reached",
        ],
    )
    def test_rate_limited(self, text):
        """429 with a keyword is a rate limit."""
        assert is_rate_limited(text) is True

    @pytest.mark.parametrize(
        "text",
        [
            "error code 429",
            "401 Unauthorized",
            "500 Internal Server Error",
            "rate limit exceeded",
            "",
        ],
    )
    def test_not_rate_limited(self, text):
        """Either part missing means no rate limit."""
        assert is_rate_limited(text) is False

    def test_keywords_are_case_sensitive(self):
        """Keyword matching is case-sensitive."""
        assert is_rate_limited("429 RATE LIMIT") is False
        assert is_rate_limited("429 too many requests") is False


class TestParseRetryAfterMs:
    """Tests for parse_retry_after_ms."""

    def test_integer_seconds(self):
        """Whole seconds convert to milliseconds."""
        assert parse_retry_after_ms("429 Too Many Requests, Retry-After: 5") == 5000

    def test_fractional_seconds(self):
        """Fractional seconds are supported."""
        assert parse_retry_after_ms("Rate limited. retry_after: 2.5 seconds") == 2500

    def test_missing(self):
        """No label yields None."""
        assert parse_retry_after_ms("500 Internal Server Error") is None

    def test_underscore_separator(self):
        """retry_after: label is recognized."""
        assert parse_retry_after_ms("retry_after: 10") == 10000

    def test_space_separator(self):
        """Space-separated label is recognized."""
        assert parse_retry_after_ms("retry-after 7") == 7000

    def test_zero(self):
        """Zero seconds parses to 0."""
        assert parse_retry_after_ms("Retry-After: 0") == 0

    def test_case_insensitive(self):
        """Label match ignores case."""
        assert parse_retry_after_ms("RETRY-AFTER: 3") == 3000
        assert parse_retry_after_ms("Retry-After: 3") == 3000

    def test_tabs_and_spaces_skipped(self):
        """Whitespace after the label is skipped."""
        assert parse_retry_after_ms("retry-after:\t  4") == 4000

    def test_non_numeric(self):
        """Non-numeric values yield None."""
        assert parse_retry_after_ms("Retry-After: abc") is None

    def test_label_at_end_of_text(self):
        """Label with nothing after it yields None."""
        assert parse_retry_after_ms("see retry-after:") is None

    def test_lone_dot_is_not_a_number(self):
        """A bare dot is not a number."""
        assert parse_retry_after_ms("retry-after: .") is None

    def test_fraction_truncated(self):
        """Sub-millisecond fractions are truncated."""
        assert parse_retry_after_ms("retry-after: 1.2345") == 1234

    def test_only_one_decimal_point(self):
        """Parsing stops at the second dot."""
        assert parse_retry_after_ms("retry-after: 1.5.9") == 1500

    def test_negative_sign_not_parsed(self):
        """Negative values are rejected."""
        assert parse_retry_after_ms("retry-after: -5") is None

    def test_first_label_honored(self):
        """The first occurrence of a label wins."""
        assert parse_retry_after_ms("retry-after: 2, retry-after: 9") == 2000

    def test_later_label_form_used_when_first_has_no_number(self):
        """A later label form is tried when the first has no number."""
        assert parse_retry_after_ms("retry-after: soon; retry_after: 6") == 6000

    def test_hint_beyond_scan_limit_ignored(self):
        """Hints past the scan limit are ignored."""
        text = "x" * 5000 + " retry-after: 3"
        assert parse_retry_after_ms(text) is None


class TestDescribeError:
    """Tests for describe_error."""

    def test_plain_exception_uses_message(self):
        """Plain exceptions render their message."""
        assert describe_error(RuntimeError("502 Bad Gateway")) == "502 Bad Gateway"

    def test_empty_message_uses_class_name(self):
        """Empty messages render as the class name."""
        assert describe_error(ConnectionResetError()) == "ConnectionResetError"

    def test_status_code_prefixed(self):
        """Typed errors gain their status code."""
        text = describe_error(AuthenticationError())
        assert text == "401 Authentication failed"
        assert is_non_retryable(text) is True

    def test_status_code_not_duplicated(self):
        """A code already in the text is not repeated."""
        error = ServerError("upstream 503 unavailable", status_code=503)
        assert describe_error(error) == "upstream 503 unavailable"

    def test_rate_limit_error_carries_retry_after(self):
        """RateLimitError renders as a rate limit with its hint."""
        text = describe_error(RateLimitError(retry_after=3))
        assert is_rate_limited(text) is True
        assert parse_retry_after_ms(text) == 3000

    def test_existing_retry_after_label_kept(self):
        """An existing label in the message takes precedence."""
        error = RateLimitError("429 rate limit, Retry-After: 1", retry_after=9)
        assert parse_retry_after_ms(describe_error(error)) == 1000

    def test_model_not_found_is_client_error(self):
        """404 model errors are not retryable."""
        assert is_non_retryable(describe_error(ModelNotFoundError("no such model"))) is True

    def test_code_inside_longer_digit_run_still_prefixed(self):
        """A code hidden in a request id does not count as present."""
        text = describe_error(AuthenticationError("invalid key (request 94017)"))
        assert text == "401 invalid key (request 94017)"
        assert is_non_retryable(text) is True

    def test_standalone_code_later_in_text_not_duplicated(self):
        """A standalone code anywhere in the text suppresses the prefix."""
        error = ModelNotFoundError("upstream replied 404 for model x-1", model="x-1")
        assert describe_error(error) == "upstream replied 404 for model x-1"

    def test_timeout_renders_408(self):
        """Provider timeouts render as a retryable 408."""
        error = ProviderTimeoutError("request timed out", timeout=30.0)
        text = describe_error(error)
        assert error.status_code == 408
        assert error.retryable is True
        assert text == "408 request timed out"
        classification = classify_error(text)
        assert classification.retryable is True
        assert classification.rate_limited is False

    def test_unavailable_renders_503(self):
        """Unreachable providers render as a retryable 503."""
        error = ProviderUnavailableError("connection refused", provider="openai")
        text = describe_error(error)
        assert error.status_code == 503
        assert error.retryable is True
        assert error.provider == "openai"
        assert text == "503 connection refused"
        assert classify_error(text).error_type == ErrorType.TRANSIENT

    def test_provider_error_defaults(self):
        """Default messages still carry their codes."""
        assert describe_error(ProviderUnavailableError()) == "503 Service Unavailable"
        assert describe_error(ProviderTimeoutError()) == "408 Request Timeout"


class TestClassifyError:
    """Tests for classify_error."""

    def test_client_error(self):
        """4xx text classifies as a client error."""
        classification = classify_error("403 Forbidden")
        assert classification.retryable is False
        assert classification.rate_limited is False
        assert classification.error_type == ErrorType.CLIENT_ERROR

    def test_rate_limit(self):
        """429 text classifies as a rate limit with its hint."""
        classification = classify_error("429 Too Many Requests, Retry-After: 2")
        assert classification.retryable is True
        assert classification.rate_limited is True
        assert classification.retry_after_ms == 2000
        assert classification.error_type == ErrorType.RATE_LIMIT

    def test_transient(self):
        """Other failures classify as transient."""
        classification = classify_error("connection reset by peer")
        assert classification.retryable is True
        assert classification.rate_limited is False
        assert classification.retry_after_ms is None
        assert classification.error_type == ErrorType.TRANSIENT
