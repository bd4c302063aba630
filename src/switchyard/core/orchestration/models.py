"""Orchestration request options and result records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from switchyard.core.transport.cancellation import CancellationToken


@dataclass
class ExecuteOptions:
    """Caller options for one orchestrated request.

    Attributes:
        use_multiple: Fan out to several providers even when confident
        max_providers: Fan-out width (defaults to the orchestrator setting)
        include_unavailable: Consider providers whose credentials are missing
        intent: Force an intent instead of classifying the query
        provider_options: Passed through to ``Provider.invoke`` (limit, language, ...)
        cancel_token: Cooperative cancellation for the whole request
        timeout: Per-attempt timeout override
        max_retries: Attempt budget override
    """

    use_multiple: bool = False
    max_providers: Optional[int] = None
    include_unavailable: bool = False
    intent: Optional[str] = None
    provider_options: dict[str, Any] = field(default_factory=dict)
    cancel_token: Optional[CancellationToken] = None
    timeout: Optional[float] = None
    max_retries: Optional[int] = None


@dataclass(frozen=True)
class OrchestrationResult:
    """Outcome of one ``execute_with_fallback`` call.

    Attributes:
        success: Whether any candidate in the chain succeeded
        provider_id: Provider that produced ``data`` (or the chain head on failure)
        provider_name: Display name of ``provider_id``
        data: Raw provider payload
        was_fallback: True when a provider other than the requested one answered
        error: Summary of the last failure, when unsuccessful
        errors: Provider id to failure message for every candidate that failed
        duration_ms: Wall time for the whole chain
    """

    success: bool
    provider_id: str
    provider_name: str
    data: Any = None
    was_fallback: bool = False
    error: Optional[str] = None
    errors: Mapping[str, str] = field(default_factory=dict)
    duration_ms: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "success": self.success,
            "provider_id": self.provider_id,
            "provider_name": self.provider_name,
            "was_fallback": self.was_fallback,
            "data": self.data,
        }
        if self.error is not None:
            result["error"] = self.error
        if self.errors:
            result["errors"] = dict(self.errors)
        if self.duration_ms is not None:
            result["duration_ms"] = round(self.duration_ms, 1)
        return result
