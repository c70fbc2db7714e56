"""
Transport for script resources: local file read, remote fetch, address check.

Remote fetches use one reused httpx.Client per Transport. Any non-2xx
response or network error raises TransportError; a failed fetch is never
handed back as content.
"""

import logging
from pathlib import Path
from urllib.parse import urlparse

import httpx

from scriptstream.core.config import settings
from scriptstream.core.errors import TransportError

_log = logging.getLogger(__name__)

_PAYLOAD_PREVIEW_CHARS = 500


class Transport:
    """Reads local files and fetches remote resources, reusing a single
    httpx.Client to avoid repeated TCP/TLS handshakes."""

    __slots__ = ("_client", "_encoding", "_max_bytes", "_schemes", "_timeout")

    def __init__(
        self,
        *,
        timeout: float | None = None,
        schemes: frozenset[str] | None = None,
        max_bytes: int | None = None,
        encoding: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._timeout = settings.RESOURCE_HTTP_TIMEOUT if timeout is None else timeout
        self._schemes = settings.resource_url_schemes if schemes is None else schemes
        self._max_bytes = settings.RESOURCE_MAX_BYTES if max_bytes is None else max_bytes
        self._encoding = encoding or settings.RESOURCE_ENCODING
        self._client = client

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout, follow_redirects=True)
        return self._client

    def is_valid_remote_address(self, candidate: str) -> bool:
        """True if *candidate* parses as a URL with an allowed scheme and a host."""
        try:
            parsed = urlparse(candidate)
        except ValueError:
            return False
        return parsed.scheme.lower() in self._schemes and bool(parsed.netloc)

    def local_exists(self, path: str) -> bool:
        try:
            return Path(path).is_file()
        except (OSError, ValueError):
            return False

    def read_local(self, path: str) -> str:
        try:
            return Path(path).read_text(encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise TransportError(f"Cannot read {path}: {e}", payload=str(e)) from e

    def fetch(self, url: str) -> str:
        """GET *url* and return its body as text. Raises TransportError on any failure."""
        try:
            resp = self._get_client().get(url)
        except httpx.HTTPError as e:
            _log.warning("Fetch of %s failed: %s", url, e)
            raise TransportError(f"Request to {url} failed: {e}", payload=str(e)) from e

        if resp.is_error:
            preview = resp.text[:_PAYLOAD_PREVIEW_CHARS]
            _log.warning("Fetch of %s returned HTTP %s", url, resp.status_code)
            raise TransportError(
                f"Request to {url} returned HTTP {resp.status_code}",
                status=resp.status_code,
                payload=preview,
            )

        if self._max_bytes > 0 and len(resp.content) > self._max_bytes:
            raise TransportError(
                f"Response from {url} exceeds RESOURCE_MAX_BYTES ({self._max_bytes})",
                status=resp.status_code,
            )
        return resp.text

    def close(self) -> None:
        if self._client is not None:
            try:
                self._client.close()
            except Exception:
                pass
            self._client = None
