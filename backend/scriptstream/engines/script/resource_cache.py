"""
ResourceCache: fetch-once, reuse-many store of script resource bodies.

Keyed by locator (local path or URL). A locator is fetched at most once per
cache; later lookups return the stored body even if the file or URL has
changed since. Failures are never cached, so the next resolve retries.

get_resource_cache() returns the process-wide instance shared by every
CommandStream that is not given its own cache.
"""

import logging
import threading

from scriptstream.core.errors import FetchFailed, LocatorInvalid, TransportError

from .transport import Transport

_log = logging.getLogger(__name__)


class ResourceCache:
    """Locator -> body cache with per-locator locking on first fetch."""

    def __init__(self, transport: Transport | None = None) -> None:
        self._transport = transport if transport is not None else Transport()
        self._bodies: dict[str, str] = {}
        self._lock = threading.Lock()
        self._fetch_locks: dict[str, threading.Lock] = {}

    def __contains__(self, locator: object) -> bool:
        return locator in self._bodies

    def __len__(self) -> int:
        return len(self._bodies)

    def resolve(self, locator: str) -> str:
        """
        Return the body for *locator*, fetching and storing it on first use.

        Raises LocatorInvalid when the locator is neither an existing local
        file nor a valid remote address, FetchFailed when reading or fetching
        it fails.
        """
        body = self._bodies.get(locator)
        if body is not None:
            _log.debug("Resource cache hit: %s", locator)
            return body

        with self._lock:
            fetch_lock = self._fetch_locks.setdefault(locator, threading.Lock())
        with fetch_lock:
            # Another thread may have finished the fetch while we waited
            body = self._bodies.get(locator)
            if body is not None:
                return body
            try:
                body = self._load(locator)
                with self._lock:
                    self._bodies[locator] = body
            finally:
                with self._lock:
                    self._fetch_locks.pop(locator, None)
        return body

    def _load(self, locator: str) -> str:
        t = self._transport
        if t.local_exists(locator):
            _log.debug("Resource cache miss, reading file: %s", locator)
            load = t.read_local
        elif t.is_valid_remote_address(locator):
            _log.debug("Resource cache miss, fetching URL: %s", locator)
            load = t.fetch
        else:
            raise LocatorInvalid(locator)
        try:
            return load(locator)
        except TransportError as e:
            raise FetchFailed(locator, status=e.status, detail=e.payload) from e

    def close(self) -> None:
        """Release the transport's HTTP client."""
        self._transport.close()

    def clear(self) -> None:
        """Drop all entries. Only for isolating tests; library code never calls it."""
        with self._lock:
            self._bodies.clear()
            self._fetch_locks.clear()


_resource_cache: ResourceCache | None = None
_cache_lock = threading.Lock()


def get_resource_cache() -> ResourceCache:
    """Return the process-wide ResourceCache (thread-safe double-checked locking)."""
    global _resource_cache
    if _resource_cache is None:
        with _cache_lock:
            if _resource_cache is None:
                _resource_cache = ResourceCache()
    return _resource_cache


def close_resource_cache() -> None:
    """Close the process-wide cache's transport, if the cache was ever created."""
    if _resource_cache is not None:
        _resource_cache.close()
