"""Unified error hierarchy for switchyard.

All custom exception classes are defined in domain-specific modules within
this package. This __init__.py re-exports everything for convenient access.

Usage:
    # Import from domain modules for specificity
    from switchyard.core.errors.transport import HttpStatusError

    # Or import from the package
    from switchyard.core.errors import AllProvidersFailedError, error_to_response
"""

# --- Root ---
from switchyard.core.errors.common import RequestCancelledError, SwitchyardError

# --- Configuration errors ---
from switchyard.core.errors.configuration import (
    CatalogError,
    ConfigurationError,
    FallbackCycleError,
    ProviderNotFoundError,
)

# --- Orchestration errors ---
from switchyard.core.errors.orchestration import (
    AllProvidersFailedError,
    NoAvailableProviderError,
    OrchestrationError,
)

# --- Provider / transport errors ---
from switchyard.core.errors.transport import (
    RETRYABLE_STATUS_CODES,
    AuthenticationError,
    HttpStatusError,
    NetworkError,
    ProviderError,
    ProxyUnavailableError,
    TransportError,
    TransportTimeoutError,
)

# --- Registry ---
from switchyard.core.errors.base import (  # noqa: E402
    ERROR_MAPPINGS,
    ErrorCode,
    ErrorType,
    error_to_response,
)

__all__ = [
    # Root
    "SwitchyardError",
    "RequestCancelledError",
    # Configuration
    "ConfigurationError",
    "ProviderNotFoundError",
    "FallbackCycleError",
    "CatalogError",
    # Provider / transport
    "RETRYABLE_STATUS_CODES",
    "ProviderError",
    "AuthenticationError",
    "TransportError",
    "NetworkError",
    "TransportTimeoutError",
    "HttpStatusError",
    "ProxyUnavailableError",
    # Orchestration
    "OrchestrationError",
    "AllProvidersFailedError",
    "NoAvailableProviderError",
    # Registry
    "ERROR_MAPPINGS",
    "ErrorCode",
    "ErrorType",
    "error_to_response",
]
