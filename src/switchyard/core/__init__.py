"""Core registry, transport and orchestration for switchyard."""

from switchyard.core.health import HealthProber, ProviderHealth
from switchyard.core.intent import IntentClassifier, IntentResult
from switchyard.core.orchestration import ExecuteOptions, OrchestrationResult, Orchestrator
from switchyard.core.registry import ProviderRegistry, load_catalog
from switchyard.core.transport import CancellationToken, ResilientTransport

__all__ = [
    "CancellationToken",
    "ExecuteOptions",
    "HealthProber",
    "IntentClassifier",
    "IntentResult",
    "OrchestrationResult",
    "Orchestrator",
    "ProviderHealth",
    "ProviderRegistry",
    "ResilientTransport",
    "load_catalog",
]
