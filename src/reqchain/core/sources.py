"""
Byte sources accepted by the request builder.

A byte source is anything with a ``read`` method. A named source also
exposes the file name used for the ``filename`` attribute of a multipart
file part. Capabilities are checked structurally, so regular binary files
from ``open()`` are named sources and ``io.BytesIO`` is not.
"""

import io
import os
from typing import Any, Optional, Protocol, Union, runtime_checkable

PathName = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]


@runtime_checkable
class ByteSource(Protocol):
    """Anything bytes can be read from sequentially."""

    def read(self, size: int = -1) -> bytes: ...


@runtime_checkable
class Named(Protocol):
    """A byte source that knows which file it came from."""

    name: Any

    def read(self, size: int = -1) -> bytes: ...


class NamedReader(io.RawIOBase):
    """Give an arbitrary byte source a file name.

    Useful for uploading in-memory content as a file part:

        Request().attach_file(NamedReader(io.BytesIO(data), "report.csv"))
    """

    def __init__(self, reader: ByteSource, name: str):
        super().__init__()
        self._reader = reader
        self.name = name

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        return self._reader.read(size)

    def readinto(self, buffer) -> int:
        data = self._reader.read(len(buffer))
        buffer[: len(data)] = data
        return len(data)

    def close(self) -> None:
        if not self.closed:
            close_source(self._reader)
        super().close()


def is_byte_source(value: Any) -> bool:
    return isinstance(value, ByteSource) and callable(getattr(value, "read", None))


def file_name(source: Any) -> Optional[str]:
    """Return the base file name of a named source, or None."""
    if not isinstance(source, Named):
        return None
    name = source.name
    if isinstance(name, bytes):
        name = os.fsdecode(name)
    elif isinstance(name, os.PathLike):
        name = os.fspath(name)
        if isinstance(name, bytes):
            name = os.fsdecode(name)
    if not isinstance(name, str) or not name:
        # file objects opened from a descriptor carry an int name
        return None
    return os.path.basename(name) or None


def close_source(source: Any) -> None:
    """Close a source if it can be closed."""
    close = getattr(source, "close", None)
    if callable(close):
        close()
