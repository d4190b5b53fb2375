"""
Streaming ``multipart/form-data`` envelope writer.

Parts are written straight into a target buffer in the standard RFC 7578
layout:

    --<boundary>\\r\\n
    Content-Disposition: form-data; name="field"; filename="a.txt"\\r\\n
    Content-Type: text/plain\\r\\n
    \\r\\n
    <bytes>\\r\\n
    --<boundary>--\\r\\n

Part headers are rendered by ``urllib3.fields.RequestField`` so the
encoding of names and file names matches what ``requests`` produces for
its own ``files=`` uploads.
"""

import io
from typing import BinaryIO, Optional

from urllib3.fields import RequestField
from urllib3.filepost import choose_boundary

from ..constants import DEFAULT_PART_CONTENT_TYPE, MIME_MULTIPART_FORM
from ..exceptions import MultipartError

CRLF = b"\r\n"


class PartWriter:
    """Writable handle for the body of the part most recently started."""

    def __init__(self, writer: "MultipartWriter"):
        self._writer = writer

    def write(self, data) -> int:
        if self._writer._closed:
            raise MultipartError("multipart writer is closed")
        if self._writer._current is not self:
            raise MultipartError("part was superseded by a newer part")
        return self._writer._buffer.write(data)

    def writable(self) -> bool:
        return self._writer._current is self and not self._writer._closed


class MultipartWriter:
    """Write a multipart envelope into a binary buffer.

    Args:
        buffer: Target buffer; a new ``io.BytesIO`` when omitted
        boundary: Boundary string; a random one when omitted
    """

    def __init__(self, buffer: Optional[BinaryIO] = None, boundary: Optional[str] = None):
        self._buffer = buffer if buffer is not None else io.BytesIO()
        self.boundary = boundary or choose_boundary()
        self._current: Optional[PartWriter] = None
        self._parts = 0
        self._closed = False

    @property
    def buffer(self) -> BinaryIO:
        return self._buffer

    @property
    def parts(self) -> int:
        return self._parts

    @property
    def content_type(self) -> str:
        """Value for the request's Content-Type header."""
        return f"{MIME_MULTIPART_FORM}; boundary={self.boundary}"

    def create_form_file(
        self, field: str, filename: str, content_type: Optional[str] = None
    ) -> PartWriter:
        """Start a file part; the body defaults to application/octet-stream."""
        part = RequestField(name=field, data=b"", filename=filename)
        part.make_multipart(content_type=content_type or DEFAULT_PART_CONTENT_TYPE)
        return self._create_part(part)

    def create_form_field(self, field: str) -> PartWriter:
        """Start a plain form value part."""
        part = RequestField(name=field, data=b"")
        part.make_multipart()
        return self._create_part(part)

    def _create_part(self, part: RequestField) -> PartWriter:
        if self._closed:
            raise MultipartError("multipart writer is closed")

        delimiter = f"--{self.boundary}".encode("ascii")
        if self._parts:
            self._buffer.write(CRLF)
        self._buffer.write(delimiter + CRLF)
        self._buffer.write(part.render_headers().encode("utf-8"))

        self._parts += 1
        self._current = PartWriter(self)
        return self._current

    def close(self) -> None:
        """Write the closing delimiter. Safe to call more than once."""
        if self._closed:
            return
        if self._parts:
            self._buffer.write(CRLF)
        self._buffer.write(f"--{self.boundary}--".encode("ascii") + CRLF)
        self._current = None
        self._closed = True

    def getvalue(self) -> bytes:
        """Bytes written so far, when the target buffer is an ``io.BytesIO``."""
        return self._buffer.getvalue()
