"""
reqchain Exception Hierarchy

Exception Hierarchy:
    ReqchainError (base)
    ├── RequestBuildError
    │   ├── SerializationError
    │   ├── EmptyFieldListError
    │   ├── TypeMismatchError
    │   ├── RequestIOError
    │   ├── MissingFileIdentityError
    │   ├── InvalidRequestError
    │   └── MultipartError
    ├── TransportError
    ├── ConfigurationError
    │   ├── InvalidConfigurationError
    │   └── ConfigurationValidationError
    └── CLIError
        └── InvalidArgumentError

This package provides focused exception components:
- base: Core ReqchainError base class
- request: Request building and transport exceptions
- config: Configuration-related exceptions
- cli: Command-line interface exceptions
- templates: Message templates and error codes
"""

from .base import ExceptionContext, ReqchainError

# CLI exceptions
from .cli import CLIError, InvalidArgumentError

# Configuration exceptions
from .config import (
    ConfigurationError,
    ConfigurationValidationError,
    InvalidConfigurationError,
)

# Request building and transport exceptions
from .request import (
    EmptyFieldListError,
    InvalidRequestError,
    MissingFileIdentityError,
    MultipartError,
    RequestBuildError,
    RequestIOError,
    SerializationError,
    TransportError,
    TypeMismatchError,
)
from .templates import ErrorCodes

__all__ = [
    # Base
    "ReqchainError",
    "ExceptionContext",
    "ErrorCodes",
    # Request building
    "RequestBuildError",
    "SerializationError",
    "EmptyFieldListError",
    "TypeMismatchError",
    "RequestIOError",
    "MissingFileIdentityError",
    "InvalidRequestError",
    "MultipartError",
    # Transport
    "TransportError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigurationError",
    "ConfigurationValidationError",
    # CLI
    "CLIError",
    "InvalidArgumentError",
]
