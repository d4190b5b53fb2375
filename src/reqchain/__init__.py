"""
reqchain: fluent HTTP request builder.

Configure a request step by step (query, form, JSON, raw file, multipart
uploads, cookies) and dispatch it through an injected ``requests``-based
client. Configuration errors are recorded on the builder instead of being
raised, and a dispatch on an errored builder never touches the network.

Architecture Overview:
- core: request builder, response wrapper, multipart writer, byte sources
- core.config: configuration models and manager
- infrastructure: HTTP client collaborator over ``requests``
- cli: command-line interface
- exceptions / logging: cross-cutting concerns
"""

__version__ = "0.1.0"

from .core.request import Request
from .core.response import Response
from .core.multipart import MultipartWriter
from .core.sources import ByteSource, Named, NamedReader
from .exceptions import ReqchainError
from .infrastructure.http import StandardClient

__all__ = [
    "Request",
    "Response",
    "MultipartWriter",
    "ByteSource",
    "Named",
    "NamedReader",
    "StandardClient",
    "ReqchainError",
    "__version__",
]
