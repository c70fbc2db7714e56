from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from scriptstream.engines.script import (
    DukpyInterpreter,
    ResourceCache,
    Transport,
    get_interpreter,
    get_resource_cache,
)
from scriptstream.main import app
from tests.utils.transport import CDN_LIB_BODY, CDN_LIB_URL, CountingMockTransport, make_transport


@pytest.fixture
def remote() -> tuple[Transport, CountingMockTransport]:
    """Transport backed by a mock HTTP server that serves CDN_LIB_URL and 404s elsewhere."""
    return make_transport({CDN_LIB_URL: (200, CDN_LIB_BODY)})


@pytest.fixture
def http_mock(remote: tuple[Transport, CountingMockTransport]) -> CountingMockTransport:
    return remote[1]


@pytest.fixture
def resource_cache(remote: tuple[Transport, CountingMockTransport]) -> ResourceCache:
    return ResourceCache(remote[0])


@pytest.fixture
def client(resource_cache: ResourceCache) -> Generator[TestClient, None, None]:
    """TestClient with an isolated resource cache and a fresh interpreter per test."""
    interpreter = DukpyInterpreter()
    app.dependency_overrides[get_resource_cache] = lambda: resource_cache
    app.dependency_overrides[get_interpreter] = lambda: interpreter
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
