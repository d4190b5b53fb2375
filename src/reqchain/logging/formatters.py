"""
Formatters for reqchain log records.

Builder and client log calls carry keyword context through ``ReqchainLogger``
(``method``, ``url``, ``field``, ``error_code``, ``error_id`` ...). The JSON
formatter groups it into ``request`` and ``error`` objects; the console
formatters append it as ``key=value`` pairs.
"""

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler

CONSOLE_FORMAT = "%(asctime)s [%(levelname)8s] %(name)s: %(message)s"
CONSOLE_DATEFMT = "%Y-%m-%d %H:%M:%S"

REQUEST_KEYS = ("method", "url", "uri", "field")
# context key -> key inside the "error" object
ERROR_KEYS = {"error_code": "code", "error_id": "id", "error_type": "type"}


def split_context(
    context: Optional[Mapping[str, Any]],
) -> Tuple[Dict[str, Any], Dict[str, Any], Dict[str, Any]]:
    """Split keyword context into (request, error, other) dictionaries."""
    request: Dict[str, Any] = {}
    error: Dict[str, Any] = {}
    other: Dict[str, Any] = {}
    for key, value in (context or {}).items():
        if value is None:
            continue
        if key in REQUEST_KEYS:
            request[key] = value
        elif key in ERROR_KEYS:
            error[ERROR_KEYS[key]] = value
        else:
            other[key] = value
    return request, error, other


def format_context(context: Optional[Mapping[str, Any]]) -> str:
    """Render keyword context as ``key=value`` pairs, request keys first."""
    request, error, other = split_context(context)
    pairs = list(request.items())
    pairs += [(f"error_{key}", value) for key, value in error.items()]
    pairs += list(other.items())
    return " ".join(f"{key}={value}" for key, value in pairs)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record.

    Example:
        {"timestamp": "...", "level": "WARNING", "logger": "reqchain.core.request",
         "message": "Skipping multipart field: ...", "service": "reqchain",
         "correlation_id": "...", "request": {"field": "doc"},
         "error": {"code": "BUILD_003", "id": "1a2b3c4d"}}
    """

    def __init__(self, service_name: str = "reqchain", version: str = "unknown"):
        super().__init__()
        self.service_name = service_name
        self.version = version

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "version": self.version,
        }

        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            entry["correlation_id"] = correlation_id

        request, error, other = split_context(getattr(record, "extra_context", None))
        if request:
            entry["request"] = request
        if error:
            entry["error"] = error
        if other:
            entry["context"] = other

        if record.exc_info:
            exc_type, exc, tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "traceback": traceback.format_exception(exc_type, exc, tb),
            }

        return json.dumps(entry, default=str)


class ContextFormatter(logging.Formatter):
    """Human-readable formatter that keeps the keyword context visible."""

    def __init__(self, fmt: str = CONSOLE_FORMAT, datefmt: Optional[str] = CONSOLE_DATEFMT):
        super().__init__(fmt, datefmt)

    def formatMessage(self, record: logging.LogRecord) -> str:
        message = super().formatMessage(record)
        context = format_context(getattr(record, "extra_context", None))
        return f"{message} [{context}]" if context else message


def create_rich_handler() -> logging.Handler:
    """Rich handler on stderr, so response bodies on stdout stay clean."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(ContextFormatter("%(message)s", datefmt=None))
    return handler
