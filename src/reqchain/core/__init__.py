"""Core request-building components."""

from .multipart import MultipartWriter, PartWriter
from .request import Request
from .response import Response
from .sources import ByteSource, Named, NamedReader, close_source, file_name

__all__ = [
    "Request",
    "Response",
    "MultipartWriter",
    "PartWriter",
    "ByteSource",
    "Named",
    "NamedReader",
    "close_source",
    "file_name",
]
