"""
CLI-related exceptions.

All exceptions related to command-line interface usage and validation.
"""

from .base import ExceptionContext, ReqchainError
from .templates import ErrorCodes, ErrorMessageTemplates


class CLIError(ReqchainError):
    """Base class for CLI-related errors."""


class InvalidArgumentError(CLIError):
    """Raised when a CLI argument cannot be parsed."""

    def __init__(self, argument: str, reason: str):
        self.argument = argument
        message = ErrorMessageTemplates.INVALID_ARGUMENT.format(argument=argument, reason=reason)
        context = ExceptionContext(
            help_text="Use 'reqchain request --help' for correct usage",
            error_code=ErrorCodes.CLI_INVALID_ARGUMENT,
        )
        super().__init__(message, context)
