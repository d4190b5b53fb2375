"""
reqchain Logging Package

Structured logging with configurable outputs:
- formatters: JSON and console formatting of keyword context, rich handler
- loggers: Logger wrapper with correlation IDs and keyword context
- config: Logging configuration
- manager: Handlers on the reqchain (and optionally urllib3) loggers
"""

from .config import LoggingConfig, create_default_config
from .formatters import ContextFormatter, StructuredFormatter
from .loggers import ReqchainLogger
from .manager import LoggingManager, configure_logging, logging_manager

get_logger = logging_manager.get_logger

__all__ = [
    "LoggingConfig",
    "LoggingManager",
    "configure_logging",
    "create_default_config",
    "ReqchainLogger",
    "get_logger",
    "StructuredFormatter",
    "ContextFormatter",
]
