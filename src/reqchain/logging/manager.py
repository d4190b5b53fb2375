"""
Applies a ``LoggingConfig`` to the ``reqchain`` logger tree.

Handlers are attached to the ``reqchain`` package logger (and to ``urllib3``
when transport logging is requested), never to the root logger, so an
application embedding reqchain keeps control of its own logging.
"""

import logging
import logging.handlers
import sys
from typing import List, Optional, Tuple

from .config import LoggingConfig
from .formatters import ContextFormatter, StructuredFormatter, create_rich_handler
from .loggers import ReqchainLogger

PACKAGE_LOGGER = "reqchain"
TRANSPORT_LOGGER = "urllib3"


class LoggingManager:
    """Singleton that owns the handlers reqchain installs."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self.config: Optional[LoggingConfig] = None
            self.handlers: List[logging.Handler] = []
            # (logger, level, propagate) before configure touched it
            self._saved: List[Tuple[logging.Logger, int, bool]] = []
            self._initialized = True

    @property
    def loggers(self) -> List[logging.Logger]:
        return [saved[0] for saved in self._saved]

    def configure(self, config: LoggingConfig) -> None:
        """Replace any previous configuration with ``config``."""
        self.reset()
        self.config = config
        self.handlers = [self._create_handler(output, config) for output in config.output]

        names = [PACKAGE_LOGGER]
        if config.include_transport:
            names.append(TRANSPORT_LOGGER)
        for name in names:
            logger = logging.getLogger(name)
            self._saved.append((logger, logger.level, logger.propagate))
            logger.setLevel(config.level)
            logger.propagate = False
            for handler in self.handlers:
                logger.addHandler(handler)

    def reset(self) -> None:
        """Detach and close installed handlers and restore logger settings."""
        for logger, level, propagate in self._saved:
            for handler in self.handlers:
                logger.removeHandler(handler)
            logger.setLevel(level)
            logger.propagate = propagate
        for handler in self.handlers:
            handler.close()
        self._saved.clear()
        self.handlers = []
        self.config = None

    def _create_handler(self, output: str, config: LoggingConfig) -> logging.Handler:
        if output == "file":
            config.file_path.parent.mkdir(parents=True, exist_ok=True)
            handler: logging.Handler = logging.handlers.RotatingFileHandler(
                config.file_path,
                maxBytes=config.max_file_size,
                backupCount=config.backup_count,
            )
        elif config.format_type == "rich":
            handler = create_rich_handler()
        else:
            handler = logging.StreamHandler(sys.stderr)

        if config.format_type == "json":
            handler.setFormatter(StructuredFormatter(config.service_name, config.version))
        elif handler.formatter is None:
            handler.setFormatter(ContextFormatter())
        handler.setLevel(config.level)
        return handler

    def get_logger(self, name: str, correlation_id: Optional[str] = None) -> ReqchainLogger:
        return ReqchainLogger(name, correlation_id)


logging_manager = LoggingManager()


def configure_logging(config: LoggingConfig) -> None:
    """Configure reqchain logging through the global manager."""
    logging_manager.configure(config)
