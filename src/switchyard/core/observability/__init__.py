"""
Observability utilities for switchyard.

Provides audit logging for request lifecycle events and redaction helpers
for anything that might carry a credential.

Example:
    from switchyard.core.observability import audit_log, redact_url

    audit_log("retry_attempt", provider="newsapi_everything", attempt=2)
    logger.debug("GET %s", redact_url(url))
"""

from switchyard.core.observability.audit import (
    AUDIT_LOGGER_NAME,
    AuditEvent,
    AuditEventType,
    AuditLogger,
    audit_log,
    get_audit_logger,
)
from switchyard.core.observability.redaction import (
    REDACTED,
    redact_headers,
    redact_params,
    redact_secrets,
    redact_url,
)

__all__ = [
    "AUDIT_LOGGER_NAME",
    "AuditEvent",
    "AuditEventType",
    "AuditLogger",
    "audit_log",
    "get_audit_logger",
    "REDACTED",
    "redact_headers",
    "redact_params",
    "redact_secrets",
    "redact_url",
]
