"""SwitchyardConfig definition and layered loading.

Priority (highest to lowest):
1. Environment variables (``SWITCHYARD_*``)
2. Project TOML config (./switchyard.toml or ./.switchyard.toml)
3. User TOML config (~/.switchyard.toml)
4. XDG config (~/.config/switchyard/config.toml)
5. Default values

``SWITCHYARD_CONFIG_FILE`` (or an explicit ``config_file``) replaces layers
2-4 with that single file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from switchyard.config.domains import (
    _VALID_CREDENTIAL_BACKENDS,
    _VALID_LOG_LEVELS,
    _VALID_PROXY_MODES,
    CredentialConfig,
    LoggingConfig,
    OrchestrationConfig,
    ProxyConfig,
    TransportConfig,
)
from switchyard.config.parsing import (
    _normalize_choice,
    _parse_bool,
    _parse_float,
    _parse_int,
)
from switchyard.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "SWITCHYARD_CONFIG_FILE"


def _merge(base: Dict[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge TOML tables section by section (later files win per key)."""
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


@dataclass
class SwitchyardConfig:
    """Top-level configuration, one nested dataclass per TOML section."""

    transport: TransportConfig = field(default_factory=TransportConfig)
    orchestration: OrchestrationConfig = field(default_factory=OrchestrationConfig)
    credentials: CredentialConfig = field(default_factory=CredentialConfig)
    proxy: ProxyConfig = field(default_factory=ProxyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    sources: list[Path] = field(default_factory=list)

    @classmethod
    def from_toml_dict(cls, data: Mapping[str, Any]) -> "SwitchyardConfig":
        """Create config from a parsed TOML document."""
        return cls(
            transport=TransportConfig.from_toml_dict(dict(data.get("transport", {}))),
            orchestration=OrchestrationConfig.from_toml_dict(dict(data.get("orchestration", {}))),
            credentials=CredentialConfig.from_toml_dict(dict(data.get("credentials", {}))),
            proxy=ProxyConfig.from_toml_dict(dict(data.get("proxy", {}))),
            logging=LoggingConfig.from_toml_dict(dict(data.get("logging", {}))),
        )

    @classmethod
    def from_env(
        cls,
        config_file: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "SwitchyardConfig":
        """
        Create configuration from TOML files and environment variables.

        Raises:
            ConfigurationError: If an explicitly named config file is missing
                or any config file is not valid TOML
        """
        env = os.environ if environ is None else environ
        data: Dict[str, Any] = {}
        sources: list[Path] = []

        toml_path = config_file or env.get(CONFIG_FILE_ENV_VAR)
        if toml_path:
            path = Path(toml_path).expanduser()
            if not path.exists():
                raise ConfigurationError(f"Config file not found: {path}")
            data = _merge(data, _read_toml(path))
            sources.append(path)
        else:
            # Layered config loading (lowest to highest priority)
            xdg_config_home = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
            candidates = [
                Path(xdg_config_home) / "switchyard" / "config.toml",
                Path.home() / ".switchyard.toml",
            ]
            project_config = Path("switchyard.toml")
            candidates.append(project_config if project_config.exists() else Path(".switchyard.toml"))

            for path in candidates:
                if path.exists():
                    data = _merge(data, _read_toml(path))
                    sources.append(path)
                    logger.debug("Loaded config from %s", path)

        config = cls.from_toml_dict(data)
        config.sources = sources
        config._load_env(env)
        return config

    def _load_env(self, env: Mapping[str, str]) -> None:
        """Apply ``SWITCHYARD_*`` environment overrides."""
        # Transport
        if timeout := env.get("SWITCHYARD_TIMEOUT"):
            self.transport.timeout = _parse_float(timeout, self.transport.timeout, "SWITCHYARD_TIMEOUT", 0.001)
        if retries := env.get("SWITCHYARD_MAX_RETRIES"):
            self.transport.max_retries = _parse_int(
                retries, self.transport.max_retries, "SWITCHYARD_MAX_RETRIES", 1
            )
        if base_delay := env.get("SWITCHYARD_BASE_DELAY"):
            self.transport.base_delay = _parse_float(
                base_delay, self.transport.base_delay, "SWITCHYARD_BASE_DELAY", 0.0
            )
        if interval := env.get("SWITCHYARD_MIN_INTERVAL"):
            self.transport.min_interval = _parse_float(
                interval, self.transport.min_interval, "SWITCHYARD_MIN_INTERVAL", 0.0
            )
        if user_agent := env.get("SWITCHYARD_USER_AGENT"):
            self.transport.user_agent = user_agent

        # Orchestration
        if max_providers := env.get("SWITCHYARD_MAX_PROVIDERS"):
            self.orchestration.max_providers = _parse_int(
                max_providers, self.orchestration.max_providers, "SWITCHYARD_MAX_PROVIDERS", 1
            )
        if threshold := env.get("SWITCHYARD_CONFIDENCE_THRESHOLD"):
            self.orchestration.confidence_threshold = _parse_float(
                threshold, self.orchestration.confidence_threshold, "SWITCHYARD_CONFIDENCE_THRESHOLD", 0.0
            )
        if catalog := env.get("SWITCHYARD_CATALOG_PATH"):
            self.orchestration.catalog_path = Path(catalog).expanduser()

        # Credentials
        if backend := env.get("SWITCHYARD_CREDENTIALS_BACKEND"):
            self.credentials.backend = _normalize_choice(
                backend,
                _VALID_CREDENTIAL_BACKENDS,
                self.credentials.backend,
                "SWITCHYARD_CREDENTIALS_BACKEND",
            )
        if cred_path := env.get("SWITCHYARD_CREDENTIALS_PATH"):
            self.credentials.path = Path(cred_path).expanduser()

        # Proxy
        if proxy_mode := env.get("SWITCHYARD_PROXY_MODE"):
            self.proxy.mode = _normalize_choice(
                proxy_mode, _VALID_PROXY_MODES, self.proxy.mode, "SWITCHYARD_PROXY_MODE"
            )
        if proxy_url := env.get("SWITCHYARD_PROXY_URL"):
            self.proxy.url = proxy_url

        # Logging
        if level := env.get("SWITCHYARD_LOG_LEVEL"):
            self.logging.level = _normalize_choice(
                level,
                _VALID_LOG_LEVELS,
                self.logging.level,
                "SWITCHYARD_LOG_LEVEL",
            )
        if audit := env.get("SWITCHYARD_AUDIT"):
            self.logging.audit = _parse_bool(audit)


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e
