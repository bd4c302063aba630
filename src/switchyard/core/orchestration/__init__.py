"""Provider orchestration: fallback chains and intent-driven fan-out."""

from switchyard.core.orchestration.models import ExecuteOptions, OrchestrationResult
from switchyard.core.orchestration.orchestrator import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_MAX_PROVIDERS,
    Orchestrator,
)

__all__ = [
    "DEFAULT_CONFIDENCE_THRESHOLD",
    "DEFAULT_MAX_PROVIDERS",
    "ExecuteOptions",
    "OrchestrationResult",
    "Orchestrator",
]
