"""Tests for scriptstream.main (application lifespan)."""

from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from scriptstream.engines.script import ResourceCache
from scriptstream.engines.script import resource_cache as resource_cache_mod
from scriptstream.main import app


def test_shutdown_closes_shared_cache() -> None:
    """Leaving the app lifespan closes the process-wide cache's HTTP client."""
    shared = MagicMock(spec=ResourceCache)
    with patch.object(resource_cache_mod, "_resource_cache", shared):
        with TestClient(app):
            shared.close.assert_not_called()
        shared.close.assert_called_once_with()
