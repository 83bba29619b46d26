"""
Reliability configuration parsing for reliable-llm.

Parses the [reliability] section of reliable-llm.toml into the settings the
retrying provider wrapper needs at startup. How the file was produced is not
this module's concern; it only reads it.

TOML Configuration Example:
    [reliability]
    provider = "openrouter"             # Optional: default "openrouter"
    model = "anthropic/claude-sonnet-4.5"  # Optional: provider-specific default
    api_key = "sk-..."                  # Optional: defaults to provider env var
    api_keys = ["sk-alt-1", "sk-alt-2"] # Optional: alternates for rotation
    max_retries = 2                     # Optional: retries after first attempt
    base_backoff_ms = 500               # Optional: clamped to >= 50
    temperature = 0.7                   # Optional

Environment Variables (fallback if not in TOML):
    - RELIABLE_LLM_PROVIDER: Provider name
    - RELIABLE_LLM_MODEL: Model identifier
    - RELIABLE_LLM_MAX_RETRIES: Retry count
    - RELIABLE_LLM_BACKOFF_MS: Base backoff in milliseconds
    - RELIABLE_LLM_API_KEYS: Comma-separated alternate keys
    - <PROVIDER>_API_KEY: Primary key (see KNOWN_PROVIDERS)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from reliable_llm.core.llm_provider import ChatProvider
from reliable_llm.core.providers import ReliableProvider
from reliable_llm.core.resilience import RetryConfig

logger = logging.getLogger(__name__)


# =============================================================================
# Known providers
# =============================================================================


@dataclass(frozen=True)
class ProviderInfo:
    """Default settings for a named chat provider."""

    key: str
    label: str
    default_model: str
    env_var: str


KNOWN_PROVIDERS: Tuple[ProviderInfo, ...] = (
    ProviderInfo("openrouter", "OpenRouter (multi-provider, recommended)", "anthropic/claude-sonnet-4.5", "OPENROUTER_API_KEY"),
    ProviderInfo("anthropic", "Anthropic (Claude direct)", "claude-sonnet-4-20250514", "ANTHROPIC_API_KEY"),
    ProviderInfo("openai", "OpenAI (GPT direct)", "gpt-5.2", "OPENAI_API_KEY"),
    ProviderInfo("gemini", "Google Gemini", "gemini-2.5-pro", "GEMINI_API_KEY"),
    ProviderInfo("deepseek", "DeepSeek", "deepseek-chat", "DEEPSEEK_API_KEY"),
    ProviderInfo("groq", "Groq (fast inference)", "llama-3.3-70b-versatile", "GROQ_API_KEY"),
    ProviderInfo("ollama", "Ollama (local)", "llama3.2", "API_KEY"),
)

DEFAULT_PROVIDER = "openrouter"
FALLBACK_MODEL = "anthropic/claude-sonnet-4.5"
FALLBACK_ENV_VAR = "API_KEY"

PROVIDER_ALIASES: Dict[str, str] = {
    "grok": "xai",
    "together": "together-ai",
    "google": "gemini",
    "google-gemini": "gemini",
}

# Providers that run locally and need no credential.
KEYLESS_PROVIDERS = frozenset({"ollama"})

DEFAULT_MAX_RETRIES = 2
DEFAULT_BASE_BACKOFF_MS = 500
DEFAULT_TEMPERATURE = 0.7


def canonical_provider_name(name: str) -> str:
    """Resolve provider aliases (``google`` -> ``gemini``); unknown names pass through."""
    return PROVIDER_ALIASES.get(name, name)


def get_provider_info(name: str) -> Optional[ProviderInfo]:
    canonical = canonical_provider_name(name)
    for info in KNOWN_PROVIDERS:
        if info.key == canonical:
            return info
    return None


def default_model_for_provider(name: str) -> str:
    info = get_provider_info(name)
    return info.default_model if info else FALLBACK_MODEL


def provider_env_var(name: str) -> str:
    info = get_provider_info(name)
    return info.env_var if info else FALLBACK_ENV_VAR


# =============================================================================
# Configuration
# =============================================================================


def _parse_key_list(value: Any) -> List[str]:
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        raise ValueError(f"api_keys must be a list or comma-separated string, got {type(value).__name__}")
    return [item.strip() for item in items if item.strip()]


def _read_reliability_table(path: Path) -> Dict[str, Any]:
    """Read the [reliability] table from a TOML file.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        tomllib.TOMLDecodeError: If the file is not valid TOML
        TypeError: If [reliability] is not a table
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "rb") as f:
        table = tomllib.load(f).get("reliability", {})

    if not isinstance(table, dict):
        raise TypeError(f"[reliability] must be a table, got {type(table).__name__}")
    return table


@dataclass
class ReliabilityConfig:
    """Provider and retry settings parsed from reliable-llm.toml.

    Attributes:
        provider: Provider name (aliases are canonicalized)
        model: Model identifier (optional, uses provider default)
        api_key: Primary API key (optional, falls back to env var)
        api_keys: Alternate keys rotated through on rate limits
        max_retries: Retries after the first attempt (0 = no retry)
        base_backoff_ms: Initial backoff between attempts
        temperature: Default sampling temperature
    """

    provider: str = DEFAULT_PROVIDER
    model: Optional[str] = None
    api_key: Optional[str] = None
    api_keys: List[str] = field(default_factory=list)
    max_retries: int = DEFAULT_MAX_RETRIES
    base_backoff_ms: int = DEFAULT_BASE_BACKOFF_MS
    temperature: float = DEFAULT_TEMPERATURE

    def get_api_key(self) -> Optional[str]:
        """Get API key, falling back to the provider's environment variable.

        Returns:
            API key string or None if not available
        """
        if self.api_key:
            return self.api_key
        return os.environ.get(provider_env_var(self.provider)) or None

    def get_model(self) -> str:
        """Get model, falling back to the provider default if not set."""
        if self.model:
            return self.model
        return default_model_for_provider(self.provider)

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.provider:
            raise ValueError("provider must not be empty")

        if self.max_retries < 0:
            raise ValueError(f"max_retries must be non-negative, got {self.max_retries}")

        if self.base_backoff_ms < 0:
            raise ValueError(f"base_backoff_ms must be non-negative, got {self.base_backoff_ms}")

        if not 0 <= self.temperature <= 2:
            raise ValueError(f"temperature must be between 0 and 2, got {self.temperature}")

        if canonical_provider_name(self.provider) not in KEYLESS_PROVIDERS and not self.get_api_key():
            raise ValueError(
                f"API key required for {self.provider} provider. "
                f"Set 'api_key' in config or {provider_env_var(self.provider)} environment variable."
            )

    def retry_config(self) -> RetryConfig:
        """Build the immutable retry configuration for the wrapper."""
        return RetryConfig(
            max_retries=self.max_retries,
            base_backoff_ms=self.base_backoff_ms,
            api_keys=tuple(self.api_keys),
        )

    @classmethod
    def from_toml(cls, path: Path) -> "ReliabilityConfig":
        """Load configuration from a TOML file.

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the configuration is invalid
        """
        return cls.from_dict(_read_reliability_table(path))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReliabilityConfig":
        """Create a config from a dictionary (typically the [reliability] table).

        Raises:
            ValueError: If a value has the wrong type
        """
        config = cls()

        if "provider" in data:
            config.provider = canonical_provider_name(str(data["provider"]).strip().lower())

        if "model" in data:
            config.model = data["model"]

        if "api_key" in data:
            config.api_key = data["api_key"]

        if "api_keys" in data:
            config.api_keys = _parse_key_list(data["api_keys"])

        if "max_retries" in data:
            config.max_retries = int(data["max_retries"])

        if "base_backoff_ms" in data:
            config.base_backoff_ms = int(data["base_backoff_ms"])

        if "temperature" in data:
            config.temperature = float(data["temperature"])

        return config

    @classmethod
    def from_env(cls) -> "ReliabilityConfig":
        """Create a config from environment variables only.

        Invalid numeric values are logged and ignored.
        """
        config = cls()

        if provider := os.environ.get("RELIABLE_LLM_PROVIDER"):
            config.provider = canonical_provider_name(provider.strip().lower())

        if model := os.environ.get("RELIABLE_LLM_MODEL"):
            config.model = model

        if max_retries := os.environ.get("RELIABLE_LLM_MAX_RETRIES"):
            try:
                config.max_retries = int(max_retries)
            except ValueError:
                logger.warning(f"Invalid RELIABLE_LLM_MAX_RETRIES: {max_retries}, using default")

        if backoff := os.environ.get("RELIABLE_LLM_BACKOFF_MS"):
            try:
                config.base_backoff_ms = int(backoff)
            except ValueError:
                logger.warning(f"Invalid RELIABLE_LLM_BACKOFF_MS: {backoff}, using default")

        if api_keys := os.environ.get("RELIABLE_LLM_API_KEYS"):
            config.api_keys = _parse_key_list(api_keys)

        return config


def load_reliability_config(
    config_file: Optional[Path] = None,
    use_env_fallback: bool = True,
) -> ReliabilityConfig:
    """Load configuration from a TOML file with environment fallback.

    Priority (highest to lowest):
    1. TOML config file (if provided or found at default locations)
    2. Environment variables
    3. Default values

    Args:
        config_file: Optional path to TOML config file
        use_env_fallback: Whether to use environment variables as fallback

    Returns:
        ReliabilityConfig with merged settings
    """
    data: Dict[str, Any] = {}
    config = ReliabilityConfig()

    candidates = (
        [config_file]
        if config_file is not None
        else [
            Path("reliable-llm.toml"),
            Path(".reliable-llm.toml"),
            Path.home() / ".config" / "reliable-llm" / "config.toml",
        ]
    )
    for path in candidates:
        if not path.exists():
            continue
        try:
            table = _read_reliability_table(path)
            config = ReliabilityConfig.from_dict(table)
        except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
            logger.warning(f"Failed to load reliability config from {path}: {e}")
            continue
        data = table
        logger.debug(f"Loaded reliability config from {path}")
        break

    if use_env_fallback:
        env_config = ReliabilityConfig.from_env()

        # Environment only fills in what the file left unset.
        if "provider" not in data:
            config.provider = env_config.provider
        if "model" not in data and env_config.model:
            config.model = env_config.model
        if "max_retries" not in data:
            config.max_retries = env_config.max_retries
        if "base_backoff_ms" not in data:
            config.base_backoff_ms = env_config.base_backoff_ms
        if "api_keys" not in data and env_config.api_keys:
            config.api_keys = env_config.api_keys

    return config


def build_reliable_provider(
    inner: ChatProvider,
    config: Optional[ReliabilityConfig] = None,
    **kwargs: Any,
) -> ReliableProvider:
    """Wrap ``inner`` using the retry settings from ``config``.

    Args:
        inner: The concrete provider to wrap
        config: Settings to use (defaults to the global configuration)
        **kwargs: Passed through to ``ReliableProvider.from_config``
            (``sleep``, ``on_rotate``, ``cancel_event``)
    """
    config = config or get_reliability_config()
    return ReliableProvider.from_config(inner, config.retry_config(), **kwargs)


# Global configuration instance
_reliability_config: Optional[ReliabilityConfig] = None


def get_reliability_config() -> ReliabilityConfig:
    """Get the global configuration instance (loaded on first call)."""
    global _reliability_config
    if _reliability_config is None:
        _reliability_config = load_reliability_config()
    return _reliability_config


def set_reliability_config(config: ReliabilityConfig) -> None:
    """Set the global configuration instance."""
    global _reliability_config
    _reliability_config = config


def reset_reliability_config() -> None:
    """Reset the global configuration to None.

    Useful for testing or reloading configuration.
    """
    global _reliability_config
    _reliability_config = None


__all__ = [
    "ProviderInfo",
    "KNOWN_PROVIDERS",
    "canonical_provider_name",
    "get_provider_info",
    "default_model_for_provider",
    "provider_env_var",
    "ReliabilityConfig",
    "load_reliability_config",
    "build_reliable_provider",
    "get_reliability_config",
    "set_reliability_config",
    "reset_reliability_config",
]
