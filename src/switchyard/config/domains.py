"""Domain-specific configuration dataclasses.

Small, focused configuration classes for each concern: transport,
orchestration, credential storage, proxy recovery and logging. Each reads
its own TOML section via ``from_toml_dict``.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from switchyard.config.parsing import _normalize_choice, _parse_bool, _parse_float, _parse_int

_VALID_CREDENTIAL_BACKENDS = {"chained", "file", "env", "memory"}
_VALID_PROXY_MODES = {"none", "relay", "egress"}
_VALID_LOG_LEVELS = {"debug", "info", "warning", "error", "critical"}


def default_credentials_path() -> Path:
    """``$XDG_CONFIG_HOME/switchyard/credentials.json``."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(xdg_config_home) / "switchyard" / "credentials.json"


@dataclass
class TransportConfig:
    """Configuration for the resilient transport.

    Attributes:
        timeout: Per-attempt timeout in seconds
        max_retries: Attempt budget per call (first attempt included)
        base_delay: Exponential backoff base in seconds
        min_interval: Minimum spacing between call starts, process-wide
        user_agent: Default User-Agent header (None uses the built-in one)
    """

    timeout: float = 15.0
    max_retries: int = 3
    base_delay: float = 1.0
    min_interval: float = 0.5
    user_agent: Optional[str] = None

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "TransportConfig":
        """Create config from TOML dict (typically [transport] section)."""
        defaults = cls()
        user_agent = data.get("user_agent")
        return cls(
            timeout=_parse_float(data.get("timeout", defaults.timeout), defaults.timeout, "transport.timeout", 0.001),
            max_retries=_parse_int(
                data.get("max_retries", defaults.max_retries), defaults.max_retries, "transport.max_retries", 1
            ),
            base_delay=_parse_float(
                data.get("base_delay", defaults.base_delay), defaults.base_delay, "transport.base_delay", 0.0
            ),
            min_interval=_parse_float(
                data.get("min_interval", defaults.min_interval), defaults.min_interval, "transport.min_interval", 0.0
            ),
            user_agent=str(user_agent) if user_agent else None,
        )


@dataclass
class OrchestrationConfig:
    """Configuration for provider selection and fan-out.

    Attributes:
        max_providers: Providers queried concurrently in fan-out mode
        confidence_threshold: Classifier confidence below which fan-out is used
        catalog_path: Custom provider catalog (None uses the bundled one)
    """

    max_providers: int = 2
    confidence_threshold: float = 0.5
    catalog_path: Optional[Path] = None

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "OrchestrationConfig":
        """Create config from TOML dict (typically [orchestration] section)."""
        catalog = data.get("catalog_path")
        return cls(
            max_providers=_parse_int(data.get("max_providers", 2), 2, "orchestration.max_providers", 1),
            confidence_threshold=_parse_float(
                data.get("confidence_threshold", 0.5), 0.5, "orchestration.confidence_threshold", 0.0
            ),
            catalog_path=Path(catalog).expanduser() if catalog else None,
        )


@dataclass
class CredentialConfig:
    """Configuration for credential storage.

    Attributes:
        backend: ``chained`` (env then file), ``file``, ``env`` or ``memory``
        path: JSON credential file for the file backend
        lock_timeout: Seconds to wait for the credential file lock
        env_prefix: Environment variable prefix for the env backend
    """

    backend: str = "chained"
    path: Optional[Path] = None
    lock_timeout: float = 10.0
    env_prefix: str = "SWITCHYARD_CREDENTIAL_"

    @property
    def resolved_path(self) -> Path:
        return self.path or default_credentials_path()

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "CredentialConfig":
        """Create config from TOML dict (typically [credentials] section)."""
        path = data.get("path")
        return cls(
            backend=_normalize_choice(
                data.get("backend", "chained"), _VALID_CREDENTIAL_BACKENDS, "chained", "credentials.backend"
            ),
            path=Path(path).expanduser() if path else None,
            lock_timeout=_parse_float(data.get("lock_timeout", 10.0), 10.0, "credentials.lock_timeout", 0.0),
            env_prefix=str(data.get("env_prefix", "SWITCHYARD_CREDENTIAL_")),
        )


@dataclass
class ProxyConfig:
    """Configuration for cross-origin proxy recovery.

    Attributes:
        mode: ``none``, ``relay`` (POST to a relay endpoint) or ``egress``
        url: Relay endpoint or egress proxy URL
        timeout: Timeout for the intermediary itself
    """

    mode: str = "none"
    url: Optional[str] = None
    timeout: float = 30.0

    @property
    def enabled(self) -> bool:
        return self.mode != "none" and bool(self.url)

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "ProxyConfig":
        """Create config from TOML dict (typically [proxy] section)."""
        url = data.get("url")
        return cls(
            mode=_normalize_choice(data.get("mode", "none"), _VALID_PROXY_MODES, "none", "proxy.mode"),
            url=str(url) if url else None,
            timeout=_parse_float(data.get("timeout", 30.0), 30.0, "proxy.timeout", 0.001),
        )


@dataclass
class LoggingConfig:
    """Configuration for log output.

    Attributes:
        level: Root log level for switchyard loggers
        audit: Whether audit events are emitted
    """

    level: str = "warning"
    audit: bool = True

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        """Create config from TOML dict (typically [logging] section)."""
        return cls(
            level=_normalize_choice(data.get("level", "warning"), _VALID_LOG_LEVELS, "warning", "logging.level"),
            audit=_parse_bool(data.get("audit", True)),
        )
