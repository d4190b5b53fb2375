"""
Pytest configuration and shared fixtures for reqchain tests.
"""

import logging
from typing import List, Optional, Tuple

import pytest
import requests
from requests.structures import CaseInsensitiveDict


class RecordingClient:
    """Client double that records requests instead of sending them.

    The builder closes the body after dispatch, so body bytes are captured
    while ``send`` runs.
    """

    def __init__(self, response: Optional[requests.Response] = None, error=None):
        self.response = response
        self.error = error
        self.sent: List[requests.Request] = []
        self.prepared: List[requests.PreparedRequest] = []
        self.bodies: List[bytes] = []

    def send(self, request: requests.Request):
        self.sent.append(request)
        prepared = request.prepare()
        self.prepared.append(prepared)

        body = prepared.body
        if hasattr(body, "read"):
            body = body.read()
        elif isinstance(body, str):
            body = body.encode("utf-8")
        self.bodies.append(body or b"")

        if self.error is not None:
            return None, self.error
        return self.response, None

    @property
    def last(self) -> requests.PreparedRequest:
        return self.prepared[-1]

    @property
    def last_body(self) -> bytes:
        return self.bodies[-1]


def build_response(
    status_code: int = 200,
    content: bytes = b"",
    headers: Optional[dict] = None,
    reason: str = "OK",
) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = content
    response.reason = reason
    response.encoding = "utf-8"
    response.headers = CaseInsensitiveDict(headers or {})
    return response


def split_multipart(body: bytes, content_type: str) -> List[Tuple[str, bytes]]:
    """Split a multipart body into (headers, content) pairs."""
    boundary = content_type.split("boundary=", 1)[1].encode("ascii")
    segments = body.split(b"--" + boundary)
    assert segments[0] == b""
    assert segments[-1] == b"--\r\n"

    parts = []
    for segment in segments[1:-1]:
        assert segment.startswith(b"\r\n") and segment.endswith(b"\r\n")
        headers, _, content = segment[2:-2].partition(b"\r\n\r\n")
        parts.append((headers.decode("utf-8"), content))
    return parts


@pytest.fixture
def ok_response():
    """A 200 response with a small JSON body."""
    return build_response(
        200, b'{"ok": true}', headers={"Content-Type": "application/json"}
    )


@pytest.fixture
def recording_client(ok_response):
    """Client double returning ``ok_response``."""
    return RecordingClient(response=ok_response)


@pytest.fixture
def client_factory():
    """The RecordingClient class, for tests that need custom responses or errors."""
    return RecordingClient


@pytest.fixture
def response_factory():
    return build_response


@pytest.fixture
def multipart_parts():
    """Function splitting a multipart body into (headers, content) pairs."""
    return split_multipart


@pytest.fixture
def text_file(tmp_path):
    """A small text file on disk."""
    path = tmp_path / "notes.txt"
    path.write_bytes(b"line one\nline two\n")
    return path


@pytest.fixture
def clean_environment(monkeypatch):
    """Remove REQCHAIN_* variables that could leak into configuration tests."""
    for var in [
        "REQCHAIN_TIMEOUT",
        "REQCHAIN_CONNECT_TIMEOUT",
        "REQCHAIN_VERIFY",
        "REQCHAIN_USER_AGENT",
        "REQCHAIN_MAX_RETRIES",
        "REQCHAIN_LOGGING_LEVEL",
        "REQCHAIN_LOGGING_FORMAT",
        "REQCHAIN_LOGGING_OUTPUT",
        "REQCHAIN_LOGGING_FILE_PATH",
    ]:
        monkeypatch.delenv(var, raising=False)
    yield monkeypatch


@pytest.fixture
def reset_logging():
    """Undo handler, level and propagation changes made by configure_logging."""
    from reqchain.logging import LoggingManager

    yield
    LoggingManager().reset()
