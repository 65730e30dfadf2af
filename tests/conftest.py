"""Shared fixtures for scan-cache tests."""
from collections.abc import Iterator

import pytest
import structlog
from click.testing import CliRunner

from scan_cache.cache import ArtifactCache, InMemoryCacheStore


@pytest.fixture(autouse=True)
def quiet_structlog() -> Iterator[None]:
    """Capture structlog events instead of printing them to stdout."""
    with structlog.testing.capture_logs():
        yield


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def store() -> InMemoryCacheStore:
    """Provide an empty in-memory cache store."""
    return InMemoryCacheStore()


@pytest.fixture
def cache(store: InMemoryCacheStore) -> ArtifactCache:
    """Provide an empty artifact cache backed by the in-memory store."""
    return ArtifactCache(store)
