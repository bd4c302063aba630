"""In-process credential stores: memory, environment, and chained."""

import logging
import os
import re
from typing import Dict, Mapping, Optional, Sequence

from switchyard.core.credentials.base import CredentialStore

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "SWITCHYARD_CREDENTIAL_"

_ENV_NAME_SANITIZER = re.compile(r"[^A-Z0-9]+")


class InMemoryCredentialStore(CredentialStore):
    """Dict-backed store, useful for tests and short-lived embedding hosts."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._secrets: Dict[str, str] = dict(initial or {})

    async def get(self, name: str) -> Optional[str]:
        return self._secrets.get(name)

    async def set(self, name: str, secret: str) -> bool:
        self._secrets[name] = secret
        return True


class EnvironmentCredentialStore(CredentialStore):
    """Read-only store resolving ``<prefix><NAME>`` environment variables.

    ``serpapi`` resolves ``SWITCHYARD_CREDENTIAL_SERPAPI``; any run of
    non-alphanumeric characters in the name becomes a single underscore.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_ENV_PREFIX,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self._prefix = prefix
        self._environ = environ if environ is not None else os.environ

    def env_var_for(self, name: str) -> str:
        return self._prefix + _ENV_NAME_SANITIZER.sub("_", name.upper()).strip("_")

    @property
    def writable(self) -> bool:
        return False

    async def get(self, name: str) -> Optional[str]:
        return self._environ.get(self.env_var_for(name)) or None

    async def set(self, name: str, secret: str) -> bool:
        logger.warning(
            "Environment credential store is read-only; export %s instead",
            self.env_var_for(name),
        )
        return False


class ChainedCredentialStore(CredentialStore):
    """Consults several stores in order.

    Reads return the first non-empty hit. Writes go to the first writable
    store only.
    """

    def __init__(self, stores: Sequence[CredentialStore]):
        if not stores:
            raise ValueError("ChainedCredentialStore requires at least one store")
        self._stores = tuple(stores)

    @property
    def stores(self) -> tuple[CredentialStore, ...]:
        return self._stores

    @property
    def writable(self) -> bool:
        return any(store.writable for store in self._stores)

    async def get(self, name: str) -> Optional[str]:
        for store in self._stores:
            secret = await store.get(name)
            if secret:
                return secret
        return None

    async def set(self, name: str, secret: str) -> bool:
        for store in self._stores:
            if store.writable:
                return await store.set(name, secret)
        logger.warning("No writable credential store configured for %s", name)
        return False
