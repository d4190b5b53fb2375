"""
Response wrapper returned by every dispatch.

Holds the ``requests.Response`` (or nothing, when the builder short-circuited
on a recorded error) together with the transport error, and reads the body
once on first access.
"""

import json
from typing import Any, Mapping, Optional

import requests

from ..exceptions import TransportError


class Response:
    """Result of ``Request.do``.

    A response built from an errored request carries neither a transport
    result nor a transport error; inspect ``Request.error`` for the cause.
    """

    def __init__(
        self,
        raw: Optional[requests.Response] = None,
        error: Optional[TransportError] = None,
    ):
        self.raw = raw
        self.error = error
        self._content: Optional[bytes] = None

    def __repr__(self) -> str:
        if self.raw is None:
            return f"<Response empty error={self.error!r}>"
        return f"<Response [{self.raw.status_code}]>"

    @property
    def is_empty(self) -> bool:
        """True when no transport result is attached."""
        return self.raw is None

    @property
    def ok(self) -> bool:
        return self.error is None and self.raw is not None and self.raw.ok

    @property
    def status_code(self) -> Optional[int]:
        return self.raw.status_code if self.raw is not None else None

    @property
    def headers(self) -> Mapping[str, str]:
        return self.raw.headers if self.raw is not None else {}

    @property
    def content(self) -> bytes:
        """Body bytes, read from the transport response once and cached."""
        if self._content is None:
            self._content = self.raw.content if self.raw is not None else b""
        return self._content

    @property
    def text(self) -> str:
        if self.raw is None:
            return ""
        encoding = self.raw.encoding or self.raw.apparent_encoding or "utf-8"
        return self.content.decode(encoding, errors="replace")

    def json(self, **kwargs) -> Any:
        return json.loads(self.content, **kwargs)

    def raise_for_error(self) -> "Response":
        """Raise the transport error, if any."""
        if self.error is not None:
            raise self.error
        return self

    def close(self) -> None:
        if self.raw is not None:
            self.raw.close()
