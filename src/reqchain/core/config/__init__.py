"""
Configuration management for reqchain.

Usage:
    from reqchain.core.config import ConfigManager

    manager = ConfigManager()
    client = manager.create_client()
"""

from ...exceptions.config import (
    ConfigurationError,
    ConfigurationValidationError,
    InvalidConfigurationError,
)
from .manager import ConfigManager
from .models import (
    ClientConfig,
    LoggingConfig,
    LogLevel,
    ReqchainConfig,
    ReqchainSettings,
)

__all__ = [
    "ReqchainConfig",
    "ClientConfig",
    "LoggingConfig",
    "LogLevel",
    "ReqchainSettings",
    "ConfigManager",
    "ConfigurationError",
    "InvalidConfigurationError",
    "ConfigurationValidationError",
]
