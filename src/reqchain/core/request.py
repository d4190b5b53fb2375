"""
Fluent request builder.

A ``Request`` accumulates the method-independent parts of an HTTP request
(query string, body, content type, cookies) and then dispatches exactly one
request through an injected client:

    response = (
        Request(client)
        .with_query({"page": "2"})
        .with_json({"name": "widget"})
        .post("https://api.example.com/items", headers={"X-Trace": "1"})
    )

Configuration errors never raise. The first one is recorded and every later
configuration call becomes a no-op; dispatching an errored builder returns
an empty ``Response`` without touching the network. Check ``Request.error``
to find out what went wrong.
"""

import io
import json
import os
import re
import shutil
import stat
from http.cookiejar import Cookie
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode, urlsplit, urlunsplit

import requests
from requests.cookies import create_cookie
from requests.structures import CaseInsensitiveDict

from ..constants import DEFAULT_FILE_FIELD, MIME_FORM, MIME_JSON, MIME_OCTET_STREAM
from ..exceptions import (
    EmptyFieldListError,
    InvalidRequestError,
    MissingFileIdentityError,
    MultipartError,
    RequestBuildError,
    RequestIOError,
    SerializationError,
    TypeMismatchError,
)
from ..logging import get_logger
from .multipart import MultipartWriter
from .response import Response
from .sources import ByteSource, close_source, file_name, is_byte_source

# Key-value multi-map: {"k": "v"}, {"k": ["v1", "v2"]} or [("k", "v1"), ("k", "v2")]
Values = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]
# Multipart fields: {"field": [source]} or {"field": [source, "content/type"]}
Fields = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]

_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_COPY_ERRORS = (OSError, ValueError, TypeError, MultipartError)


def encode_values(values: Optional[Values]) -> str:
    """Encode a multi-map as ``application/x-www-form-urlencoded`` text."""
    if not values:
        return ""
    return urlencode(values, doseq=True)


class Request:
    """Accumulate request configuration, then dispatch it once.

    ``with_query`` replaces the query string of the dispatched URI; without
    it a query embedded in the URI is sent unchanged. Query and form pairs
    are encoded in the order given, not sorted by key.
    """

    def __init__(self, client=None):
        """Create a builder.

        Args:
            client: Object with ``send(request) -> (response, error)``;
                a ``StandardClient`` when omitted
        """
        if client is None:
            from ..infrastructure.http import StandardClient

            client = StandardClient()
        self.client = client
        self.request: Optional[requests.Request] = None
        self.logger = get_logger(__name__)

        self._error: Optional[RequestBuildError] = None
        self._body: Optional[ByteSource] = None
        self._params: Optional[str] = None
        self._mime = ""
        self._cookies: List[Cookie] = []

    def __repr__(self) -> str:
        return f"<Request content_type={self._mime!r} error={self._error!r}>"

    @property
    def error(self) -> Optional[RequestBuildError]:
        """First configuration error recorded, if any."""
        return self._error

    @property
    def body(self) -> Optional[ByteSource]:
        return self._body

    @property
    def content_type(self) -> str:
        return self._mime

    @property
    def query(self) -> Optional[str]:
        return self._params

    @property
    def headers(self) -> Optional[CaseInsensitiveDict]:
        """Headers of the dispatched request, None before dispatch."""
        return self.request.headers if self.request is not None else None

    @property
    def cookies(self) -> List[Cookie]:
        """Cookies carried by the dispatched request's Cookie header."""
        if self.request is None:
            return []
        header = self.request.headers.get("Cookie")
        if not header:
            return []
        cookies = []
        for pair in header.split(";"):
            name, sep, value = pair.strip().partition("=")
            if sep and name:
                if len(value) > 1 and value[0] == value[-1] == '"':
                    value = value[1:-1]
                cookies.append(create_cookie(name, value))
        return cookies

    def _record(self, error: RequestBuildError, cause: Optional[BaseException] = None) -> RequestBuildError:
        if cause is not None:
            error.__cause__ = cause
        if self._error is None:
            self._error = error
        self.logger.warning(
            f"Request configuration failed: {error.message}",
            error_code=error.error_code,
            error_id=error.correlation_id,
        )
        return error

    def _fail(self, error: RequestBuildError, cause: Optional[BaseException] = None) -> "Request":
        self._record(error, cause)
        return self

    # Configuration

    def with_query(self, params: Optional[Values]) -> "Request":
        """Replace the URL query string."""
        if self._error is not None:
            return self
        self._params = encode_values(params)
        return self

    def with_form(self, data: Optional[Values]) -> "Request":
        """Send ``data`` as an urlencoded form body."""
        if self._error is not None:
            return self
        self._mime = MIME_FORM
        self._body = io.BytesIO(encode_values(data).encode("ascii"))
        return self

    def with_query_and_form(self, params: Optional[Values], data: Optional[Values]) -> "Request":
        """Set the query string and an urlencoded form body in one call."""
        return self.with_query(params).with_form(data)

    def with_json(self, data: Any) -> "Request":
        """Send ``data`` as a JSON document.

        On encoding failure the previous body and content type are kept and
        a ``SerializationError`` is recorded.
        """
        if self._error is not None:
            return self
        try:
            body = json.dumps(data, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as e:
            return self._fail(SerializationError(str(e)), e)
        self._mime = MIME_JSON
        self._body = io.BytesIO(body.encode("utf-8"))
        return self

    def with_file(self, reader: ByteSource) -> "Request":
        """Send the bytes of ``reader`` verbatim as the body."""
        if self._error is not None:
            return self
        self._mime = MIME_OCTET_STREAM
        self._body = reader
        return self

    def attach_file(self, reader: ByteSource, content_type: Optional[str] = None) -> "Request":
        """Upload one named source as the ``file`` field of a multipart body.

        The source is closed once its bytes are copied, whatever the outcome.
        """
        if self._error is not None:
            return self
        name = file_name(reader)
        if name is None:
            return self._fail(MissingFileIdentityError(reader))

        writer = MultipartWriter()
        try:
            if content_type is not None and not isinstance(content_type, str):
                return self._fail(TypeMismatchError(DEFAULT_FILE_FIELD, content_type, expected="str"))
            try:
                part = writer.create_form_file(DEFAULT_FILE_FIELD, name, content_type)
                shutil.copyfileobj(reader, part)
            except _COPY_ERRORS as e:
                return self._fail(RequestIOError(DEFAULT_FILE_FIELD, str(e)), e)
        finally:
            close_source(reader)

        self._finish_multipart(writer)
        return self

    def attach_files(self, fields: Optional[Fields]) -> "Request":
        """Build a multipart body from several fields.

        Each field maps to ``[source]`` or ``[source, content_type]``. Named
        sources become file parts; other byte sources, ``str`` and ``bytes``
        become plain values and their content type is ignored. A field with
        no values fails the whole call. Any other per-field failure skips
        that field and processing continues; the last such failure is
        recorded. Named sources are closed after the pass. ``None`` means no
        fields and yields an empty envelope.
        """
        if self._error is not None:
            return self
        try:
            items = _field_items(fields)
        except TypeMismatchError as e:
            return self._fail(e)

        writer = MultipartWriter()
        to_close: List[ByteSource] = []
        last_error: Optional[RequestBuildError] = None
        try:
            for field, values in items:
                if len(values) == 0:
                    return self._fail(EmptyFieldListError(field))

                source = values[0]
                if isinstance(source, str):
                    source = io.BytesIO(source.encode("utf-8"))
                elif isinstance(source, (bytes, bytearray)):
                    source = io.BytesIO(bytes(source))
                elif not is_byte_source(source):
                    last_error = self._field_error(TypeMismatchError(field, source))
                    continue

                name = file_name(source)
                if name is not None:
                    to_close.append(source)

                content_type = values[1] if len(values) > 1 else None
                if content_type is not None and not isinstance(content_type, str):
                    last_error = self._field_error(TypeMismatchError(field, content_type, expected="str"))
                    continue

                try:
                    if name is not None:
                        part = writer.create_form_file(field, name, content_type)
                    else:
                        part = writer.create_form_field(field)
                    shutil.copyfileobj(source, part)
                except _COPY_ERRORS as e:
                    last_error = self._field_error(RequestIOError(field, str(e)), e)
                    continue
        finally:
            for source in to_close:
                close_source(source)

        self._finish_multipart(writer)
        if last_error is not None:
            self._error = last_error
        return self

    def _field_error(self, error: RequestBuildError, cause: Optional[BaseException] = None) -> RequestBuildError:
        if cause is not None:
            error.__cause__ = cause
        self.logger.warning(
            f"Skipping multipart field: {error.message}",
            error_code=error.error_code,
            error_id=error.correlation_id,
        )
        return error

    def _finish_multipart(self, writer: MultipartWriter) -> None:
        writer.close()
        body = writer.buffer
        body.seek(0)
        self._mime = writer.content_type
        self._body = body

    def set_cookies(self, *cookies: Cookie) -> "Request":
        """Replace the cookies sent with the request.

        Cookies are any objects with ``name`` and ``value``, e.g. from
        ``requests.cookies.create_cookie``.
        """
        if self._error is not None:
            return self
        self._cookies = list(cookies)
        return self

    # Dispatch

    def _prepare_request(
        self, method: str, uri: str, headers: Optional[Mapping[str, str]] = None
    ) -> Optional[requests.Request]:
        if not method or not _TOKEN.match(method):
            self._record(InvalidRequestError(method, uri, "invalid method"))
            return None
        if not uri:
            self._record(InvalidRequestError(method, uri, "empty URI"))
            return None
        try:
            parts = urlsplit(uri)
        except ValueError as e:
            self._record(InvalidRequestError(method, uri, str(e)), e)
            return None
        if getattr(self._body, "closed", False):
            self._record(InvalidRequestError(method, uri, "body was already sent or closed"))
            return None

        url = uri
        if self._params is not None:
            url = urlunsplit(parts._replace(query=self._params))

        request_headers = CaseInsensitiveDict()
        if self._mime:
            request_headers["Content-Type"] = self._mime
        if headers:
            for key, value in headers.items():
                if isinstance(value, (list, tuple)):
                    value = value[0] if value else ""
                request_headers[key] = value

        if self._cookies:
            pairs = "; ".join(_cookie_pair(cookie) for cookie in self._cookies)
            existing = request_headers.get("Cookie")
            request_headers["Cookie"] = f"{existing}; {pairs}" if existing else pairs

        return requests.Request(
            method=method,
            url=url,
            headers=request_headers,
            data=_payload(self._body),
        )

    def do(self, method: str, uri: str, headers: Optional[Mapping[str, str]] = None) -> Response:
        """Dispatch the request.

        ``headers`` are applied after the builder's defaults, so they may
        override Content-Type. The body source is closed on every path.
        """
        try:
            if self._error is not None:
                self.logger.debug(
                    "Skipping dispatch of errored request",
                    method=method,
                    uri=uri,
                    error_code=self._error.error_code,
                )
                return Response()

            request = self._prepare_request(method, uri, headers)
            if request is None:
                return Response()
            self.request = request

            self.logger.debug("Dispatching request", method=method, url=request.url)
            response, error = self.client.send(request)
            return Response(response, error)
        finally:
            if self._body is not None:
                close_source(self._body)

    def get(self, uri: str, headers: Optional[Mapping[str, str]] = None) -> Response:
        return self.do("GET", uri, headers)

    def post(self, uri: str, headers: Optional[Mapping[str, str]] = None) -> Response:
        return self.do("POST", uri, headers)

    def put(self, uri: str, headers: Optional[Mapping[str, str]] = None) -> Response:
        return self.do("PUT", uri, headers)

    def patch(self, uri: str, headers: Optional[Mapping[str, str]] = None) -> Response:
        return self.do("PATCH", uri, headers)

    def delete(self, uri: str, headers: Optional[Mapping[str, str]] = None) -> Response:
        return self.do("DELETE", uri, headers)

    def head(self, uri: str) -> Response:
        return self.do("HEAD", uri)

    def trace(self, uri: str) -> Response:
        return self.do("TRACE", uri)

    def options(self, uri: str) -> Response:
        return self.do("OPTIONS", uri)

    def connect(self, uri: str) -> Response:
        return self.do("CONNECT", uri)


def _field_items(fields: Optional[Fields]) -> List[Tuple[str, Sequence[Any]]]:
    """Normalize ``fields`` into ``(name, values)`` pairs.

    Raises:
        TypeMismatchError: ``fields`` is neither a mapping nor an iterable
            of pairs
    """
    if fields is None:
        return []
    if isinstance(fields, Mapping):
        pairs = list(fields.items())
    elif isinstance(fields, (str, bytes)) or not isinstance(fields, Iterable):
        raise TypeMismatchError("fields", fields, expected="mapping")
    else:
        pairs = list(fields)

    items = []
    for pair in pairs:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise TypeMismatchError("fields", pair, expected="mapping")
        field, values = pair
        if not isinstance(values, (list, tuple)):
            values = [values]
        items.append((field, values))
    return items


def _payload(body: Optional[ByteSource]) -> Any:
    """Body handed to ``requests``.

    In-memory buffers are passed as bytes and empty files as ``b""`` so an
    empty body is framed with ``Content-Length: 0`` rather than chunked.
    """
    if isinstance(body, io.BytesIO):
        return body.read()
    if body is not None and _is_exhausted_file(body):
        return b""
    return body


def _is_exhausted_file(body: ByteSource) -> bool:
    try:
        info = os.fstat(body.fileno())
        return stat.S_ISREG(info.st_mode) and info.st_size <= body.tell()
    except (AttributeError, OSError, ValueError):
        return False


_COOKIE_NAME_REPLACEMENTS = str.maketrans({"\n": "-", "\r": "-"})


def _cookie_pair(cookie: Cookie) -> str:
    """Render ``name=value`` with the value reduced to valid cookie octets.

    Control characters, ``"``, ``;`` and ``\\`` are dropped; a value with a
    space or comma is quoted.
    """
    name = str(cookie.name).translate(_COOKIE_NAME_REPLACEMENTS)
    value = "" if cookie.value is None else str(cookie.value)
    value = "".join(c for c in value if 0x20 <= ord(c) < 0x7F and c not in '";\\')
    if " " in value or "," in value:
        value = f'"{value}"'
    return f"{name}={value}"
