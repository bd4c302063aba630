"""Configuration error classes.

Configuration errors are fatal for the request that hit them and are never
retried or absorbed by the fallback chain.
"""

from typing import Optional, Sequence

from switchyard.core.errors.common import SwitchyardError


class ConfigurationError(SwitchyardError):
    """Invalid or inconsistent configuration (registry, catalog, settings)."""


class ProviderNotFoundError(ConfigurationError):
    """Raised when a provider id is not present in the registry.

    Attributes:
        provider_id: The id that failed to resolve
        referenced_by: Provider or intent that referenced the unknown id
    """

    def __init__(self, provider_id: str, referenced_by: Optional[str] = None):
        self.provider_id = provider_id
        self.referenced_by = referenced_by
        message = f"Unknown provider: {provider_id}"
        if referenced_by:
            message += f" (referenced by {referenced_by})"
        super().__init__(message)


class FallbackCycleError(ConfigurationError):
    """Raised when a provider's fallback chain eventually reaches itself.

    Attributes:
        cycle: Provider ids forming the cycle, first id repeated at the end
    """

    def __init__(self, cycle: Sequence[str]):
        self.cycle = tuple(cycle)
        super().__init__("Fallback cycle detected: " + " -> ".join(self.cycle))


class CatalogError(ConfigurationError):
    """Raised when the provider catalog cannot be read or validated.

    Attributes:
        source: Where the catalog was read from
    """

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)
