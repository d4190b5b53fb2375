"""
Configuration manager for reqchain.

Loads the TOML configuration file, applies ``REQCHAIN_*`` environment
overrides, validates the result and builds ready-to-use clients from it.
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

from ...exceptions.config import (
    ConfigurationError,
    ConfigurationValidationError,
    InvalidConfigurationError,
)
from ...infrastructure.http import StandardClient
from ...logging import LoggingConfig as RuntimeLoggingConfig
from .models import ReqchainConfig, ReqchainSettings


@dataclass
class EnvironmentOverride:
    """Helper for applying environment variable overrides."""
    config_section: Dict[str, Any]
    settings: ReqchainSettings

    def apply_if_set(self, setting_name: str, config_key: str) -> None:
        """Apply setting if it's set in environment."""
        value = getattr(self.settings, setting_name, None)
        if value is not None:
            self.config_section[config_key] = value


class ConfigManager:
    """Load, validate and persist reqchain configuration."""

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_file: Path to a config file. Defaults to
                ``~/.config/reqchain/config.toml``.
        """
        if config_file:
            self.config_file = Path(config_file)
        else:
            self.config_file = Path.home() / ".config" / "reqchain" / "config.toml"

        self._config: Optional[ReqchainConfig] = None

    def load_config(self) -> ReqchainConfig:
        """Load and validate configuration from file and environment."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}
        if self.config_file.exists():
            config_data = self._load_toml_file()

        config_data = self._apply_env_overrides(config_data)

        try:
            self._config = ReqchainConfig(**config_data)
        except (ValueError, TypeError) as e:
            raise ConfigurationValidationError([f"Configuration validation failed: {e}"]) from e

        return self._config

    def _load_toml_file(self) -> Dict[str, Any]:
        """Load configuration from TOML file."""
        try:
            with open(self.config_file, "rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise InvalidConfigurationError(
                str(self.config_file), f"Invalid TOML syntax: {e}", "valid TOML format"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file: {self.config_file}",
                help_text="Check file permissions and path",
            ) from e

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        settings = ReqchainSettings()

        client = config_data.setdefault("client", {})
        override = EnvironmentOverride(client, settings)
        override.apply_if_set("reqchain_timeout", "timeout")
        override.apply_if_set("reqchain_connect_timeout", "connect_timeout")
        override.apply_if_set("reqchain_verify", "verify")
        override.apply_if_set("reqchain_user_agent", "user_agent")
        override.apply_if_set("reqchain_max_retries", "max_retries")

        logging_config = config_data.setdefault("logging", {})
        override = EnvironmentOverride(logging_config, settings)
        override.apply_if_set("reqchain_logging_level", "level")
        override.apply_if_set("reqchain_logging_format", "format")
        override.apply_if_set("reqchain_logging_file_path", "file_path")
        if settings.reqchain_logging_output:
            logging_config["output"] = [
                o.strip() for o in settings.reqchain_logging_output.split(",")
            ]

        return config_data

    def _filter_none_values(self, data: Any) -> Any:
        """Recursively filter out None values, which TOML cannot represent."""
        if isinstance(data, dict):
            return {k: self._filter_none_values(v) for k, v in data.items() if v is not None}
        elif isinstance(data, list):
            return [self._filter_none_values(item) for item in data if item is not None]
        else:
            return data

    def save_config(self, config: Optional[ReqchainConfig] = None) -> Path:
        """Write configuration to the TOML file and return its path."""
        if config is None:
            config = self.load_config()

        config_dict = self._filter_none_values(config.model_dump(mode="json"))

        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "wb") as f:
                tomli_w.dump(config_dict, f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot write configuration file: {self.config_file}",
                help_text="Check that you have write permissions for the directory",
            ) from e

        self._config = config
        return self.config_file

    def create_client(self) -> StandardClient:
        """Build an HTTP client from the client section."""
        client = self.load_config().client
        return StandardClient(
            timeout=(client.connect_timeout, client.timeout),
            verify=client.verify,
            allow_redirects=client.allow_redirects,
            user_agent=client.user_agent,
            default_headers=client.default_headers,
            max_retries=client.max_retries,
            backoff_factor=client.backoff_factor,
        )

    def logging_config(self, service_name: str = "reqchain", version: str = "unknown") -> RuntimeLoggingConfig:
        """Translate the logging section for ``configure_logging``."""
        section = self.load_config().logging
        return RuntimeLoggingConfig(
            level=section.level.value,
            format_type=section.format,
            output=list(section.output),
            file_path=section.file_path,
            max_file_size=section.max_file_size,
            backup_count=section.backup_count,
            service_name=service_name,
            version=version,
        )
