"""Secret redaction for error text that ends up in logs.

Provider error messages sometimes echo the request's credentials back.
Only the key shapes chat providers actually use are matched here.
"""

import re
from typing import Final, List, Tuple

SENSITIVE_PATTERNS: Final[List[Tuple[str, str]]] = [
    (r"(?i)bearer\s+([a-zA-Z0-9_\-\.]+)", "BEARER_TOKEN"),
    (r"(?i)(api[_-]?key|apikey|x-api-key)\s*[:=]\s*['\"]?([a-zA-Z0-9_\-]{16,})['\"]?", "API_KEY"),
    # OpenAI / Anthropic / OpenRouter style secret keys
    (r"\bsk-[a-zA-Z0-9_\-]{16,}", "API_KEY"),
    # Google API keys
    (r"\bAIza[0-9A-Za-z_\-]{35}", "API_KEY"),
    # Groq keys
    (r"\bgsk_[a-zA-Z0-9]{20,}", "API_KEY"),
]


def redact_secrets(text: str, *, redaction_format: str = "[REDACTED:{label}]") -> str:
    """Replace credential-shaped substrings in ``text``.

    Example:
        >>> redact_secrets("401 invalid key sk-abcdefghijklmnopqrstuv")
        '401 invalid key [REDACTED:API_KEY]'
    """
    result = text
    for pattern, label in SENSITIVE_PATTERNS:
        result = re.sub(pattern, redaction_format.format(label=label), result)
    return result
