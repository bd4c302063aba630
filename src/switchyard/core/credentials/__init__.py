"""Credential store abstraction and implementations."""

from switchyard.core.credentials.base import CredentialStore
from switchyard.core.credentials.file import FileCredentialStore
from switchyard.core.credentials.stores import (
    DEFAULT_ENV_PREFIX,
    ChainedCredentialStore,
    EnvironmentCredentialStore,
    InMemoryCredentialStore,
)

__all__ = [
    "CredentialStore",
    "ChainedCredentialStore",
    "DEFAULT_ENV_PREFIX",
    "EnvironmentCredentialStore",
    "FileCredentialStore",
    "InMemoryCredentialStore",
]
