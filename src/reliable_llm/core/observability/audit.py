"""Audit logging for retry lifecycle events.

Audit events are written to a dedicated logger
(``reliable_llm.core.observability.audit``) so operators can route them
separately from ordinary diagnostics.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class AuditEventType(Enum):
    """Types of audit events emitted by the resilience layer."""

    RETRY_ATTEMPT = "retry_attempt"
    CREDENTIAL_ROTATION = "credential_rotation"
    NON_RETRYABLE = "non_retryable"
    RETRIES_EXHAUSTED = "retries_exhausted"
    RETRY_CANCELLED = "retry_cancelled"


@dataclass
class AuditEvent:
    """Structured audit event."""

    event_type: AuditEventType
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    provider: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp,
            "details": self.details,
        }
        if self.provider:
            result["provider"] = self.provider
        return result


class AuditLogger:
    """Structured audit logging for retry events."""

    def __init__(self):
        self._logger = logging.getLogger(__name__)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        self._logger.info(f"AUDIT: {event.event_type.value}", extra={"audit": event.to_dict()})


# Global audit logger
_audit = AuditLogger()


def get_audit_logger() -> AuditLogger:
    """Get the global audit logger."""
    return _audit


def audit_log(event_type: str, provider: Optional[str] = None, **details: Any) -> None:
    """
    Convenience function for audit logging.

    Args:
        event_type: One of the ``AuditEventType`` values
        provider: Display name of the provider involved
        **details: Additional details to include in the audit log

    Raises:
        ValueError: If ``event_type`` is not a known audit event
    """
    _audit.log(AuditEvent(event_type=AuditEventType(event_type), provider=provider, details=details))
