"""
Error reporting for the reqchain CLI.

Maps errors to messages on stderr and to process exit codes.
"""

import logging

from rich.console import Console
from rich.markup import escape

from ..constants import (
    EXIT_BUILD_ERROR,
    EXIT_CONFIG_ERROR,
    EXIT_TRANSPORT_ERROR,
)
from ..exceptions import (
    CLIError,
    ConfigurationError,
    ReqchainError,
    RequestBuildError,
    TransportError,
)

logger = logging.getLogger("reqchain.cli")


class CLIErrorHandler:
    """Report errors consistently and pick the exit code."""

    def __init__(self, console: Console = None):
        self.console = console or Console(stderr=True)

    def handle(self, error: ReqchainError) -> int:
        """Print ``error`` and return the exit code to use."""
        if isinstance(error, TransportError):
            title, code = "Request failed", EXIT_TRANSPORT_ERROR
        elif isinstance(error, ConfigurationError):
            title, code = "Configuration error", EXIT_CONFIG_ERROR
        elif isinstance(error, (RequestBuildError, CLIError)):
            title, code = "Invalid request", EXIT_BUILD_ERROR
        else:
            title, code = "Error", EXIT_TRANSPORT_ERROR

        self.console.print(f"[red]{title}:[/red] {escape(error.message)}", highlight=False)
        if error.help_text:
            self.console.print(f"[blue]Help:[/blue] {escape(error.help_text)}", highlight=False)
        self.console.print(f"[dim]Error ID: {error.correlation_id}[/dim]")

        logger.debug("CLI error", extra={"extra_context": error.to_dict()})
        return code
