"""
HTTP client collaborator used by the request builder.

The builder constructs a ``requests.Request`` and hands it to ``send``;
transport, TLS, redirects and retries all belong to the underlying
``requests.Session``.
"""

import logging
from typing import Dict, Optional, Tuple, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ...constants import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    RETRY_STATUS_FORCELIST,
)
from ...exceptions import TransportError

Timeout = Union[float, Tuple[float, float]]


class StandardClient:
    """Send prepared requests through a ``requests.Session``."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[Timeout] = DEFAULT_TIMEOUT_SECONDS,
        verify: bool = True,
        allow_redirects: bool = True,
        user_agent: Optional[str] = None,
        default_headers: Optional[Dict[str, str]] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
    ):
        """Initialize the client.

        Args:
            session: Optional existing session to use
            timeout: Seconds, or a (connect, read) tuple; None waits forever
            verify: Verify TLS certificates
            allow_redirects: Follow redirects
            user_agent: Overrides the session's User-Agent header
            default_headers: Headers added to the session
            max_retries: Retry attempts mounted on a created session
            backoff_factor: Backoff factor for those retries
        """
        self.timeout = timeout
        self.verify = verify
        self.allow_redirects = allow_redirects
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.session = session or self._create_session(max_retries, backoff_factor)
        if user_agent:
            self.session.headers["User-Agent"] = user_agent
        if default_headers:
            self.session.headers.update(default_headers)

    def _create_session(self, max_retries: int, backoff_factor: float) -> requests.Session:
        """Create a session, mounting a retry policy only when one is requested."""
        session = requests.Session()

        if max_retries > 0:
            retry_strategy = Retry(
                total=max_retries,
                backoff_factor=backoff_factor,
                status_forcelist=RETRY_STATUS_FORCELIST,
                allowed_methods=["HEAD", "GET", "OPTIONS", "TRACE", "PUT", "DELETE"],
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("http://", adapter)
            session.mount("https://", adapter)

        return session

    def prepare(self, request: requests.Request) -> requests.PreparedRequest:
        """Merge session defaults into the request."""
        return self.session.prepare_request(request)

    def send(
        self, request: Union[requests.Request, requests.PreparedRequest]
    ) -> Tuple[Optional[requests.Response], Optional[TransportError]]:
        """Send one request.

        Returns:
            ``(response, None)`` on success or ``(None, TransportError)`` when
            the transport fails. HTTP error statuses are successful sends.
        """
        prepared = request if isinstance(request, requests.PreparedRequest) else self.prepare(request)

        self.logger.debug(f"{prepared.method} {prepared.url}")
        try:
            response = self.session.send(
                prepared,
                timeout=self.timeout,
                verify=self.verify,
                allow_redirects=self.allow_redirects,
            )
        except requests.RequestException as e:
            self.logger.debug(f"{prepared.method} {prepared.url} failed: {e}")
            return None, TransportError(prepared.method or "", prepared.url or "", e)

        self._log_response(response)
        return response, None

    def _log_response(self, response: requests.Response) -> None:
        self.logger.debug(
            f"Response: {response.status_code} - "
            f"{response.headers.get('Content-Length', '?')} bytes"
        )

    def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self) -> "StandardClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
