"""Registry data model: provider descriptors, auth configs and intent mappings.

All records are frozen: the registry is built once at load and read
concurrently afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any, Mapping, Optional

if TYPE_CHECKING:
    from switchyard.core.providers.base import InvocationContext, Provider


class ProviderCategory(str, Enum):
    """Closed set of provider categories."""

    SEARCH = "search"
    NEWS = "news"
    WEATHER = "weather"
    STOCKS = "stocks"
    MOVIES = "movies"
    TECH = "tech"
    GENERAL = "general"


class Priority(IntEnum):
    """Provider priority; lower values sort first."""

    HIGH = 1
    MEDIUM = 2
    LOW = 3


class AuthType(str, Enum):
    """How a provider authenticates."""

    NONE = "none"
    API_KEY = "api_key"
    OAUTH2 = "oauth2"
    BASIC = "basic"


@dataclass(frozen=True)
class AuthConfig:
    """Credential injection rules for one provider.

    Attributes:
        type: Authentication scheme
        header_name: Header to carry the credential, if any
        header_format: Template with one ``{key}`` or ``{token}`` placeholder
        query_param: Query parameter to carry the raw credential, if any
        credential_key: Store key for API_KEY and BASIC secrets
        token_key: Store key for OAUTH2 tokens
        host_header_name: Extra fixed header name (gateway-style APIs)
        host: Value for ``host_header_name``
    """

    type: AuthType = AuthType.NONE
    header_name: Optional[str] = None
    header_format: Optional[str] = None
    query_param: Optional[str] = None
    credential_key: Optional[str] = None
    token_key: Optional[str] = None
    host_header_name: Optional[str] = None
    host: Optional[str] = None

    @property
    def secret_key(self) -> Optional[str]:
        """Store key the transport reads the secret from."""
        if self.type is AuthType.OAUTH2:
            return self.token_key or self.credential_key
        return self.credential_key


@dataclass(frozen=True)
class ProviderDescriptor:
    """Immutable registry entry for one external provider."""

    id: str
    display_name: str
    category: ProviderCategory
    priority: Priority
    provider: "Provider" = field(compare=False, repr=False)
    requires_credential: bool = False
    credential_type: Optional[str] = None
    quota_limit: Optional[int] = None
    quota_window: Optional[str] = None
    fallback_chain: tuple[str, ...] = ()
    auth: Optional[AuthConfig] = None

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: "InvocationContext",
    ) -> Any:
        """Run the provider's request against *query*; returns its raw payload."""
        return await self.provider.invoke(query, options, ctx)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.display_name,
            "category": self.category.value,
            "priority": int(self.priority),
            "requires_credential": self.requires_credential,
            "credential_type": self.credential_type,
            "quota_limit": self.quota_limit,
            "quota_window": self.quota_window,
            "fallback_chain": list(self.fallback_chain),
        }


@dataclass(frozen=True)
class IntentMapping:
    """Primary/fallback provider ids and trigger keywords for one intent."""

    intent: str
    primary: tuple[str, ...] = ()
    fallback: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
