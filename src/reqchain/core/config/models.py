"""
Configuration models for reqchain.

Pydantic models validate the TOML configuration file; ``ReqchainSettings``
reads ``REQCHAIN_*`` environment overrides.
"""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...constants import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_CONNECTION_TIMEOUT,
    DEFAULT_LOG_BACKUP_COUNT,
    DEFAULT_LOG_FILE_SIZE_BYTES,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    MAX_RETRIES_LIMIT,
    MAX_TIMEOUT_SECONDS,
    MIN_LOG_FILE_SIZE_BYTES,
)


class LogLevel(str, Enum):
    """Valid logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ClientConfig(BaseModel):
    """Settings for the HTTP client collaborator."""

    timeout: float = Field(
        DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        le=MAX_TIMEOUT_SECONDS,
        description="Read timeout in seconds",
    )
    connect_timeout: float = Field(
        DEFAULT_CONNECTION_TIMEOUT,
        gt=0,
        le=MAX_TIMEOUT_SECONDS,
        description="Connect timeout in seconds",
    )
    verify: bool = Field(True, description="Verify TLS certificates")
    allow_redirects: bool = Field(True, description="Follow redirects")
    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent header")
    max_retries: int = Field(
        DEFAULT_MAX_RETRIES,
        ge=0,
        le=MAX_RETRIES_LIMIT,
        description="Transport retry attempts (0 disables retries)",
    )
    backoff_factor: float = Field(
        DEFAULT_BACKOFF_FACTOR, ge=0, le=10, description="Retry backoff factor"
    )
    default_headers: Dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.WARNING, description="Logging level")
    format: str = Field("console", description="Log format: console, json, rich")
    output: List[str] = Field(["console"], description="Log outputs: console, file")
    file_path: Optional[Path] = Field(None, description="Log file path")
    max_file_size: int = Field(
        DEFAULT_LOG_FILE_SIZE_BYTES,
        ge=MIN_LOG_FILE_SIZE_BYTES,
        description="Maximum log file size in bytes",
    )
    backup_count: int = Field(
        DEFAULT_LOG_BACKUP_COUNT,
        ge=1,
        le=20,
        description="Number of backup log files to keep",
    )

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ["console", "json", "rich"]:
            raise ValueError("format must be one of: console, json, rich")
        return v

    @field_validator("output")
    @classmethod
    def validate_output(cls, v: List[str]) -> List[str]:
        valid_outputs = {"console", "file"}
        for output in v:
            if output not in valid_outputs:
                raise ValueError(
                    f"output must contain only: {', '.join(sorted(valid_outputs))}"
                )
        return v


class ReqchainConfig(BaseModel):
    """Main reqchain configuration model."""

    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "extra": "forbid",
        "validate_assignment": True,
        "str_strip_whitespace": True,
    }


class ReqchainSettings(BaseSettings):
    """Settings that can be overridden by environment variables."""

    reqchain_timeout: Optional[float] = Field(None, alias="REQCHAIN_TIMEOUT")
    reqchain_connect_timeout: Optional[float] = Field(None, alias="REQCHAIN_CONNECT_TIMEOUT")
    reqchain_verify: Optional[bool] = Field(None, alias="REQCHAIN_VERIFY")
    reqchain_user_agent: Optional[str] = Field(None, alias="REQCHAIN_USER_AGENT")
    reqchain_max_retries: Optional[int] = Field(None, alias="REQCHAIN_MAX_RETRIES")

    reqchain_logging_level: Optional[str] = Field(None, alias="REQCHAIN_LOGGING_LEVEL")
    reqchain_logging_format: Optional[str] = Field(None, alias="REQCHAIN_LOGGING_FORMAT")
    reqchain_logging_output: Optional[str] = Field(None, alias="REQCHAIN_LOGGING_OUTPUT")
    reqchain_logging_file_path: Optional[str] = Field(None, alias="REQCHAIN_LOGGING_FILE_PATH")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )
