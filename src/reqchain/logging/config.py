"""
Runtime logging settings.

``ConfigManager.logging_config()`` builds one of these from the ``[logging]``
section of the configuration file; ``configure_logging`` applies it to the
``reqchain`` logger tree.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..constants import DEFAULT_LOG_BACKUP_COUNT, DEFAULT_LOG_FILE_SIZE_BYTES

FORMAT_TYPES = ("console", "json", "rich")
OUTPUTS = ("console", "file")
DEFAULT_LOG_FILE = Path("logs/reqchain.log")


@dataclass
class LoggingConfig:
    """Where reqchain log records go and how they are rendered.

    ``include_transport`` also routes ``urllib3`` connection and retry
    records through the same handlers, which is what ``-vv`` turns on.
    """

    level: Union[str, int] = logging.WARNING
    format_type: str = "console"
    output: Union[str, List[str]] = "console"
    file_path: Optional[Path] = None
    max_file_size: int = DEFAULT_LOG_FILE_SIZE_BYTES
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT
    service_name: str = "reqchain"
    version: str = "unknown"
    include_transport: bool = False

    def __post_init__(self):
        if isinstance(self.level, str):
            self.level = logging.getLevelName(self.level.upper())
            if not isinstance(self.level, int):
                raise ValueError(f"unknown log level: {self.level}")
        if self.format_type not in FORMAT_TYPES:
            raise ValueError(f"format_type must be one of: {', '.join(FORMAT_TYPES)}")

        self.output = [self.output] if isinstance(self.output, str) else list(self.output)
        unknown = [o for o in self.output if o not in OUTPUTS]
        if unknown:
            raise ValueError(f"unknown log output(s): {', '.join(unknown)}")

        if self.file_path is not None:
            self.file_path = Path(self.file_path)
        elif "file" in self.output:
            self.file_path = DEFAULT_LOG_FILE


def create_default_config() -> LoggingConfig:
    """Warnings and errors on the console, as a library should."""
    return LoggingConfig()
