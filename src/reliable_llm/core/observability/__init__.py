"""
Observability utilities for reliable-llm.

Provides audit logging for retry lifecycle events and redaction of
credentials from error text before it is logged.
"""

from reliable_llm.core.observability.audit import (
    AuditEvent,
    AuditEventType,
    AuditLogger,
    audit_log,
    get_audit_logger,
)
from reliable_llm.core.observability.redaction import (
    SENSITIVE_PATTERNS,
    redact_secrets,
)

__all__ = [
    # Audit
    "AuditEvent",
    "AuditEventType",
    "AuditLogger",
    "audit_log",
    "get_audit_logger",
    # Redaction
    "SENSITIVE_PATTERNS",
    "redact_secrets",
]
