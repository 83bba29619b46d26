"""Error classification from textual error descriptions.

The resilience layer is provider-agnostic: it never inspects SDK exception
types, only the text an error renders to. Three predicates drive every
decision:

- ``is_non_retryable``: a 4xx status code other than 429/408 appears
- ``is_rate_limited``: "429" plus a rate-limit keyword appears
- ``parse_retry_after_ms``: a ``Retry-After`` hint and its value in seconds

``describe_error`` produces that text from an exception, folding in any
``status_code`` / ``retry_after`` attributes the exception carries.
"""

import math
from typing import Iterator, Optional

from reliable_llm.core.resilience.models import ErrorClassification, ErrorType

# Only this much of an error message is searched for a Retry-After hint.
RETRY_AFTER_SCAN_LIMIT = 4096

RETRY_AFTER_LABELS = (
    "retry-after:",
    "retry_after:",
    "retry-after ",
    "retry_after ",
)

RATE_LIMIT_KEYWORDS = ("Too Many", "rate", "limit")

RETRYABLE_CLIENT_CODES = frozenset({408, 429})

_DIGITS = frozenset("0123456789")


def _status_codes(text: str) -> Iterator[int]:
    """Yield every standalone three-digit run in ``text``, left to right.

    Longer digit runs are skipped whole.
    """
    i = 0
    length = len(text)
    while i < length:
        if text[i] not in _DIGITS:
            i += 1
            continue
        end = i
        while end < length and text[end] in _DIGITS:
            end += 1
        if end - i == 3:
            yield int(text[i:end])
        i = end


def is_non_retryable(text: str) -> bool:
    """Return True if ``text`` carries a 4xx status code other than 429/408.

    Only runs of exactly three digits are read as status codes. The first
    4xx code found decides the result.
    """
    for code in _status_codes(text):
        if 400 <= code < 500:
            return code not in RETRYABLE_CLIENT_CODES
    return False


def is_rate_limited(text: str) -> bool:
    """Return True if ``text`` looks like a 429 rate-limit response.

    Both the literal "429" and one of the case-sensitive keywords must be
    present.
    """
    return "429" in text and any(keyword in text for keyword in RATE_LIMIT_KEYWORDS)


def _parse_decimal(text: str, start: int, stop: int) -> Optional[float]:
    end = start
    seen_dot = False
    while end < stop:
        ch = text[end]
        if ch in _DIGITS:
            end += 1
        elif ch == "." and not seen_dot:
            seen_dot = True
            end += 1
        else:
            break
    if end == start:
        return None
    try:
        return float(text[start:end])
    except ValueError:
        return None


def parse_retry_after_ms(text: str) -> Optional[int]:
    """Extract a Retry-After hint from ``text`` as whole milliseconds.

    Labels are matched case-insensitively and tried in the order of
    ``RETRY_AFTER_LABELS``; the first label whose value parses wins. The
    value is read as seconds with an optional fractional part.

    Returns:
        Milliseconds (truncated), or None if no usable hint is present
    """
    scanned = text[:RETRY_AFTER_SCAN_LIMIT]
    lowered = scanned.lower()
    stop = len(scanned)

    for label in RETRY_AFTER_LABELS:
        pos = lowered.find(label)
        if pos < 0:
            continue
        start = pos + len(label)
        if start >= stop:
            continue
        while start < stop and scanned[start] in " \t":
            start += 1

        seconds = _parse_decimal(scanned, start, stop)
        if seconds is not None and math.isfinite(seconds) and seconds >= 0.0:
            return int(seconds * 1000.0)

    return None


def describe_error(error: BaseException) -> str:
    """Render an exception to the text the classifier works on.

    Uses ``str(error)``, or the class name when the message is empty. An
    integer ``status_code`` attribute is prefixed unless the text already
    carries it as a standalone three-digit code. A numeric ``retry_after``
    attribute (seconds) is appended when the text carries no Retry-After
    label.
    """
    text = str(error) or type(error).__name__

    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int) and not isinstance(status_code, bool):
        if status_code not in _status_codes(text):
            text = f"{status_code} {text}"

    retry_after = getattr(error, "retry_after", None)
    if (
        isinstance(retry_after, (int, float))
        and not isinstance(retry_after, bool)
        and parse_retry_after_ms(text) is None
    ):
        text = f"{text} (retry-after: {float(retry_after):.3f})"

    return text


def classify_error(text: str) -> ErrorClassification:
    """Aggregate the classifier predicates for one error description."""
    if is_non_retryable(text):
        return ErrorClassification(retryable=False, error_type=ErrorType.CLIENT_ERROR)

    rate_limited = is_rate_limited(text)
    return ErrorClassification(
        retryable=True,
        rate_limited=rate_limited,
        retry_after_ms=parse_retry_after_ms(text),
        error_type=ErrorType.RATE_LIMIT if rate_limited else ErrorType.TRANSIENT,
    )
