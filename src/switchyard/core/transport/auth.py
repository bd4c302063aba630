"""Credential injection for outbound requests.

Credentials are read from the store at call time and placed into a header,
a query parameter, or both, according to the provider's ``AuthConfig``.
A missing credential fails fast with ``AuthenticationError`` before any
network I/O.
"""

import base64
import logging
from dataclasses import replace
from typing import Optional

from switchyard.core.credentials import CredentialStore
from switchyard.core.errors import AuthenticationError
from switchyard.core.registry.models import AuthConfig, AuthType
from switchyard.core.transport.models import RequestContext

logger = logging.getLogger(__name__)

DEFAULT_API_KEY_FORMAT = "{key}"
DEFAULT_BEARER_FORMAT = "Bearer {token}"


def format_credential(template: Optional[str], secret: str) -> str:
    """Substitute *secret* into a ``{key}``/``{token}`` header template."""
    return (template or DEFAULT_API_KEY_FORMAT).replace("{key}", secret).replace("{token}", secret)


def basic_auth_value(secret: str, provider: str) -> str:
    """Build ``Basic <b64>`` from a ``username:password`` secret."""
    if ":" not in secret:
        raise AuthenticationError(
            provider,
            "BASIC credential must be formatted as 'username:password'",
        )
    encoded = base64.b64encode(secret.encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


async def apply_auth(
    context: RequestContext,
    auth_config: Optional[AuthConfig],
    store: CredentialStore,
    provider: str = "unknown",
) -> RequestContext:
    """Return a copy of *context* carrying the provider's credential.

    Raises:
        AuthenticationError: If the credential is missing or malformed
    """
    if auth_config is None or auth_config.type is AuthType.NONE:
        return context

    key_name = auth_config.secret_key
    secret = await store.get(key_name) if key_name else None
    if not secret:
        raise AuthenticationError(
            provider,
            f"Missing credential '{key_name}'",
            credential_key=key_name,
        )

    headers = dict(context.headers)
    params = dict(context.params)

    if auth_config.type is AuthType.BASIC:
        headers[auth_config.header_name or "Authorization"] = basic_auth_value(secret, provider)
    else:
        template = auth_config.header_format
        if template is None and auth_config.type is AuthType.OAUTH2:
            template = DEFAULT_BEARER_FORMAT
        if auth_config.header_name:
            headers[auth_config.header_name] = format_credential(template, secret)
        if auth_config.query_param:
            params[auth_config.query_param] = secret
        if not auth_config.header_name and not auth_config.query_param:
            headers["Authorization"] = format_credential(template, secret)

    if auth_config.host_header_name and auth_config.host:
        headers[auth_config.host_header_name] = auth_config.host

    logger.debug("Injected %s credential for %s", auth_config.type.value, provider)
    return replace(context, headers=headers, params=params)
