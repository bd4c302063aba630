"""Audit logging for request lifecycle events.

Provides structured audit logging with automatic correlation ID population
from request context. Audit records go to a dedicated logger so hosts can
route them separately from diagnostic logs.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from switchyard.core.context import get_correlation_id

logger = logging.getLogger(__name__)

AUDIT_LOGGER_NAME = f"{__name__}.audit"


class AuditEventType(Enum):
    """Types of audit events emitted by switchyard."""

    RATE_LIMIT_WAIT = "rate_limit_wait"
    RETRY_ATTEMPT = "retry_attempt"
    PROXY_MODE_ENABLED = "proxy_mode_enabled"
    PROVIDER_SKIPPED = "provider_skipped"
    PROVIDER_FAILED = "provider_failed"
    FALLBACK_ENGAGED = "fallback_engaged"
    INTENT_CLASSIFIED = "intent_classified"
    CREDENTIAL_WRITE = "credential_write"
    REQUEST_CANCELLED = "request_cancelled"
    OTHER = "other"


@dataclass
class AuditEvent:
    """Structured audit event."""

    event_type: AuditEventType
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Auto-populate correlation_id from context if not set."""
        if self.correlation_id is None:
            self.correlation_id = get_correlation_id() or None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp,
            "details": self.details,
        }
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        return result


class AuditLogger:
    """Writes audit events to the ``<module>.audit`` logger."""

    def __init__(self):
        self._logger = logging.getLogger(AUDIT_LOGGER_NAME)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        self._logger.info("AUDIT: %s", event.event_type.value, extra={"audit": event.to_dict()})


# Global audit logger
_audit = AuditLogger()


def get_audit_logger() -> AuditLogger:
    """Get the global audit logger."""
    return _audit


def audit_log(event_type: str, **details: Any) -> None:
    """
    Convenience function for audit logging.

    Args:
        event_type: Type of event (rate_limit_wait, retry_attempt,
                    proxy_mode_enabled, provider_skipped, fallback_engaged, ...)
        **details: Additional details to include in the audit log
    """
    try:
        event_enum = AuditEventType(event_type)
    except ValueError:
        event_enum = AuditEventType.OTHER
        details["original_event_type"] = event_type

    _audit.log(AuditEvent(event_type=event_enum, details=details))
