"""Declarative provider catalog loading.

The catalog is a TOML document (``catalog.toml`` ships with the package)
validated with pydantic before being turned into frozen registry records.
Each provider entry names a ``handler`` that is bound to a Provider class
from ``PROVIDER_HANDLERS``.
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Optional, Union

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from switchyard.core.errors import CatalogError
from switchyard.core.registry.models import (
    AuthConfig,
    AuthType,
    IntentMapping,
    Priority,
    ProviderCategory,
    ProviderDescriptor,
)
from switchyard.core.registry.registry import ProviderRegistry

if TYPE_CHECKING:
    from switchyard.core.providers.base import Provider

logger = logging.getLogger(__name__)

BUNDLED_CATALOG = "catalog.toml"


class AuthEntry(BaseModel):
    """``[providers.<id>.auth]`` table."""

    model_config = ConfigDict(extra="forbid")

    type: AuthType = Field(default=AuthType.NONE, description="Authentication scheme")
    header_name: Optional[str] = None
    header_format: Optional[str] = None
    query_param: Optional[str] = None
    credential_key: Optional[str] = None
    token_key: Optional[str] = None
    host_header_name: Optional[str] = None
    host: Optional[str] = None

    @model_validator(mode="after")
    def validate_placeholders(self) -> "AuthEntry":
        """A header template must carry exactly one credential placeholder."""
        if self.header_format is not None:
            count = self.header_format.count("{key}") + self.header_format.count("{token}")
            if count != 1:
                raise ValueError(
                    f"header_format {self.header_format!r} must contain exactly one "
                    "{key} or {token} placeholder"
                )
        if self.type is AuthType.OAUTH2 and not (self.token_key or self.credential_key):
            raise ValueError("oauth2 auth requires token_key")
        if self.type in (AuthType.API_KEY, AuthType.BASIC) and not self.credential_key:
            raise ValueError(f"{self.type.value} auth requires credential_key")
        return self

    def to_config(self) -> AuthConfig:
        return AuthConfig(**self.model_dump())


class ProviderEntry(BaseModel):
    """``[providers.<id>]`` table."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, description="Display name")
    category: ProviderCategory
    priority: str = Field(default="medium", description="high, medium or low")
    handler: str
    requires_credential: bool = False
    credential_type: Optional[str] = None
    quota_limit: Optional[int] = Field(default=None, ge=0)
    quota_window: Optional[str] = None
    fallbacks: list[str] = Field(default_factory=list)
    auth: Optional[AuthEntry] = None

    @model_validator(mode="after")
    def validate_entry(self) -> "ProviderEntry":
        """Check priority names and credential consistency."""
        if self.priority.upper() not in Priority.__members__:
            raise ValueError(f"unknown priority {self.priority!r}")
        if self.requires_credential and not self.credential_type:
            raise ValueError("requires_credential needs credential_type")
        return self


class IntentEntry(BaseModel):
    """``[[intents]]`` array entry."""

    model_config = ConfigDict(extra="forbid")

    intent: str = Field(min_length=1)
    primary: list[str] = Field(default_factory=list)
    fallback: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)


class CatalogDocument(BaseModel):
    """Whole catalog file."""

    model_config = ConfigDict(extra="forbid")

    providers: dict[str, ProviderEntry] = Field(default_factory=dict)
    intents: list[IntentEntry] = Field(default_factory=list)


def _build_descriptor(
    provider_id: str,
    entry: ProviderEntry,
    handlers: Mapping[str, type[Provider]],
) -> ProviderDescriptor:
    return ProviderDescriptor(
        id=provider_id,
        display_name=entry.name,
        category=entry.category,
        priority=Priority[entry.priority.upper()],
        provider=handlers[entry.handler](),
        requires_credential=entry.requires_credential,
        credential_type=entry.credential_type,
        quota_limit=entry.quota_limit,
        quota_window=entry.quota_window,
        fallback_chain=tuple(entry.fallbacks),
        auth=entry.auth.to_config() if entry.auth else None,
    )


def build_registry(
    data: Mapping[str, object],
    *,
    handlers: Optional[Mapping[str, type[Provider]]] = None,
    source: str = "<catalog>",
) -> ProviderRegistry:
    """Validate a parsed catalog mapping and build a registry from it.

    Raises:
        CatalogError: If the document fails schema validation
        ConfigurationError: On dangling references or fallback cycles
    """
    try:
        document = CatalogDocument.model_validate(data)
    except ValidationError as e:
        raise CatalogError(str(e), source=source) from e

    if handlers is None:
        from switchyard.core.providers import PROVIDER_HANDLERS

        handlers = PROVIDER_HANDLERS
    unknown = sorted({e.handler for e in document.providers.values()} - set(handlers))
    if unknown:
        raise CatalogError(f"unknown handler(s): {', '.join(unknown)}", source=source)

    descriptors = [
        _build_descriptor(provider_id, entry, handlers)
        for provider_id, entry in document.providers.items()
    ]
    intents = [
        IntentMapping(
            intent=item.intent,
            primary=tuple(item.primary),
            fallback=tuple(item.fallback),
            keywords=tuple(k.lower() for k in item.keywords),
        )
        for item in document.intents
    ]
    return ProviderRegistry(descriptors, intents)


def load_catalog(path: Optional[Union[str, Path]] = None) -> ProviderRegistry:
    """Load a catalog file (the bundled one when *path* is None).

    Raises:
        CatalogError: If the file is missing, not TOML, or fails validation
        ConfigurationError: On dangling references or fallback cycles
    """
    try:
        if path is None:
            source = f"switchyard.core.registry/{BUNDLED_CATALOG}"
            raw = resources.files("switchyard.core.registry").joinpath(BUNDLED_CATALOG).read_text("utf-8")
        else:
            source = str(path)
            raw = Path(path).expanduser().read_text("utf-8")
        data = tomllib.loads(raw)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise CatalogError(f"cannot read catalog: {e}", source=source) from e

    registry = build_registry(data, source=source)
    logger.debug("Loaded catalog from %s", source)
    return registry
