"""Abstract credential store interface.

Credentials are opaque strings keyed by name (for example ``"serpapi"`` or
``"openweather"``). Stores never raise on storage failure: a failed read
reports ``None`` and a failed write reports ``False``, after logging the
cause. Nothing above this layer caches secrets.
"""

from abc import ABC, abstractmethod
from typing import Optional


class CredentialStore(ABC):
    """Async key-to-secret lookup backed by some persistent storage."""

    @abstractmethod
    async def get(self, name: str) -> Optional[str]:
        """Return the secret stored under *name*, or None if absent/unreadable."""
        ...

    @abstractmethod
    async def set(self, name: str, secret: str) -> bool:
        """Store *secret* under *name*. Returns False if the write failed."""
        ...

    @property
    def writable(self) -> bool:
        """Whether ``set`` can ever succeed for this store."""
        return True

    async def has(self, name: str) -> bool:
        """Return True when a non-empty secret exists under *name*."""
        return bool(await self.get(name))
