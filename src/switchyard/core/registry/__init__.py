"""Provider registry: descriptors, intent mappings and catalog loading."""

from switchyard.core.registry.models import (
    AuthConfig,
    AuthType,
    IntentMapping,
    Priority,
    ProviderCategory,
    ProviderDescriptor,
)
from switchyard.core.registry.registry import ProviderRegistry
from switchyard.core.registry.catalog import build_registry, load_catalog  # noqa: E402

__all__ = [
    "AuthConfig",
    "AuthType",
    "IntentMapping",
    "Priority",
    "ProviderCategory",
    "ProviderDescriptor",
    "ProviderRegistry",
    "build_registry",
    "load_catalog",
]
