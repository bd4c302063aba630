"""Configuration for switchyard.

Loads layered TOML configuration plus ``SWITCHYARD_*`` environment
overrides into ``SwitchyardConfig``.
"""

from switchyard.config.domains import (
    CredentialConfig,
    LoggingConfig,
    OrchestrationConfig,
    ProxyConfig,
    TransportConfig,
    default_credentials_path,
)
from switchyard.config.loader import CONFIG_FILE_ENV_VAR, SwitchyardConfig

__all__ = [
    "CONFIG_FILE_ENV_VAR",
    "CredentialConfig",
    "LoggingConfig",
    "OrchestrationConfig",
    "ProxyConfig",
    "SwitchyardConfig",
    "TransportConfig",
    "default_credentials_path",
]
