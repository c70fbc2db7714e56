"""Unit tests for engines.script.resource_cache."""

import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from scriptstream.core.errors import FetchFailed, LocatorInvalid, TransportError
from scriptstream.engines.script import CommandStream, ResourceCache, Transport
from scriptstream.engines.script import resource_cache as resource_cache_mod
from tests.utils.transport import CDN_LIB_BODY, CDN_LIB_URL, CountingMockTransport, make_transport


class TestResolve:
    def test_local_file(self, resource_cache: ResourceCache, tmp_path: Path) -> None:
        p = tmp_path / "a.js"
        p.write_text("var a = 1;", encoding="utf-8")
        assert resource_cache.resolve(str(p)) == "var a = 1;"
        assert str(p) in resource_cache
        assert len(resource_cache) == 1

    def test_local_file_cached_despite_change(self, resource_cache: ResourceCache, tmp_path: Path) -> None:
        p = tmp_path / "a.js"
        p.write_text("old", encoding="utf-8")
        first = resource_cache.resolve(str(p))
        p.write_text("new", encoding="utf-8")
        assert resource_cache.resolve(str(p)) == first == "old"

    def test_remote_fetched_once(self, resource_cache: ResourceCache, http_mock: CountingMockTransport) -> None:
        assert resource_cache.resolve(CDN_LIB_URL) == CDN_LIB_BODY
        http_mock.routes[CDN_LIB_URL] = (200, "changed upstream")
        assert resource_cache.resolve(CDN_LIB_URL) == CDN_LIB_BODY
        assert http_mock.requested == [CDN_LIB_URL]

    def test_invalid_locator(self, resource_cache: ResourceCache, http_mock: CountingMockTransport) -> None:
        with pytest.raises(LocatorInvalid) as ei:
            resource_cache.resolve("not-a-real-path-or-url")
        assert ei.value.locator == "not-a-real-path-or-url"
        assert http_mock.requested == []
        assert len(resource_cache) == 0

    def test_unsupported_scheme_is_invalid(self, resource_cache: ResourceCache) -> None:
        with pytest.raises(LocatorInvalid):
            resource_cache.resolve("ftp://cdn.example.com/lib.js")

    def test_local_file_preferred_over_url_check(self, tmp_path: Path) -> None:
        """An existing local path is read, never fetched."""
        p = tmp_path / "lib.js"
        p.write_text("local", encoding="utf-8")
        transport = MagicMock(spec=Transport)
        transport.local_exists.return_value = True
        transport.read_local.return_value = "local"
        cache = ResourceCache(transport)
        assert cache.resolve(str(p)) == "local"
        transport.fetch.assert_not_called()


class TestFetchFailure:
    def test_http_error_raises_fetch_failed(self, resource_cache: ResourceCache) -> None:
        with pytest.raises(FetchFailed) as ei:
            resource_cache.resolve("https://cdn.example.com/missing.js")
        assert ei.value.status == 404
        assert ei.value.detail == "not found"
        assert isinstance(ei.value.__cause__, TransportError)

    def test_failure_not_cached_and_retried(self) -> None:
        transport, mock = make_transport({CDN_LIB_URL: (503, "try later")})
        cache = ResourceCache(transport)
        with pytest.raises(FetchFailed):
            cache.resolve(CDN_LIB_URL)
        assert CDN_LIB_URL not in cache

        mock.routes[CDN_LIB_URL] = (200, CDN_LIB_BODY)
        assert cache.resolve(CDN_LIB_URL) == CDN_LIB_BODY
        assert mock.requested == [CDN_LIB_URL, CDN_LIB_URL]

    def test_unreadable_local_file(self) -> None:
        transport = MagicMock(spec=Transport)
        transport.local_exists.return_value = True
        transport.read_local.side_effect = TransportError("Cannot read x.js", payload="denied")
        with pytest.raises(FetchFailed) as ei:
            ResourceCache(transport).resolve("x.js")
        assert ei.value.detail == "denied"
        assert ei.value.status is None

    def test_failed_locator_leaves_no_fetch_lock(self, resource_cache: ResourceCache) -> None:
        for i in range(3):
            with pytest.raises(FetchFailed):
                resource_cache.resolve(f"https://cdn.example.com/missing-{i}.js")
        with pytest.raises(LocatorInvalid):
            resource_cache.resolve("nowhere")
        assert resource_cache._fetch_locks == {}


class TestConcurrency:
    def test_concurrent_first_resolve_fetches_once(self) -> None:
        started = threading.Event()
        release = threading.Event()
        calls: list[str] = []

        def slow_fetch(url: str) -> str:
            calls.append(url)
            started.set()
            release.wait(timeout=5)
            return "body"

        transport = MagicMock(spec=Transport)
        transport.local_exists.return_value = False
        transport.is_valid_remote_address.return_value = True
        transport.fetch.side_effect = slow_fetch
        cache = ResourceCache(transport)

        results: list[str] = []
        threads = [
            threading.Thread(target=lambda: results.append(cache.resolve(CDN_LIB_URL)))
            for _ in range(8)
        ]
        for t in threads:
            t.start()
        started.wait(timeout=5)
        release.set()
        for t in threads:
            t.join(timeout=5)

        assert calls == [CDN_LIB_URL]
        assert results == ["body"] * 8


class TestClose:
    def test_close_closes_transport(self) -> None:
        transport = MagicMock(spec=Transport)
        ResourceCache(transport).close()
        transport.close.assert_called_once_with()

    def test_close_resource_cache_without_instance_is_noop(self) -> None:
        with patch.object(resource_cache_mod, "_resource_cache", None):
            resource_cache_mod.close_resource_cache()
            assert resource_cache_mod._resource_cache is None


class TestClear:
    def test_clear_forces_refetch(self, resource_cache: ResourceCache, http_mock: CountingMockTransport) -> None:
        resource_cache.resolve(CDN_LIB_URL)
        resource_cache.clear()
        assert len(resource_cache) == 0
        resource_cache.resolve(CDN_LIB_URL)
        assert len(http_mock.requested) == 2


def test_get_resource_cache_is_singleton() -> None:
    with patch.object(resource_cache_mod, "_resource_cache", None):
        first = resource_cache_mod.get_resource_cache()
        assert resource_cache_mod.get_resource_cache() is first
        assert isinstance(first, ResourceCache)


def test_default_cache_shared_by_streams() -> None:
    """Streams built without a cache share the process-wide one."""
    transport, mock = make_transport({CDN_LIB_URL: (200, CDN_LIB_BODY)})
    with patch.object(resource_cache_mod, "_resource_cache", ResourceCache(transport)):
        CommandStream().add_file(CDN_LIB_URL)
        CommandStream().add_file(CDN_LIB_URL, "Cdn")
    assert mock.requested == [CDN_LIB_URL]
