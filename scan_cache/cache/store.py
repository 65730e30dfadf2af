"""Persistence backends for the artifact cache."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from scan_cache.exceptions import CacheStoreError
from scan_cache.models.artifact import Artifact

log = structlog.get_logger("scan_cache.cache")

_ARTIFACTS = TypeAdapter(list[Artifact])


class CacheStore(ABC):
    """Abstract base class for artifact cache storage.

    A store only moves whole snapshots: `read()` returns everything that was
    last written, `write()` replaces it.
    """

    @abstractmethod
    def read(self) -> list[Artifact]:
        """Read the persisted artifacts.

        Returns:
            Persisted artifacts, empty if nothing was written yet.

        Raises:
            CacheStoreError: If the stored data cannot be read.
        """

    @abstractmethod
    def write(self, artifacts: list[Artifact]) -> None:
        """Persist a snapshot of the cache.

        Args:
            artifacts: All artifacts currently held by the cache.

        Raises:
            CacheStoreError: If the snapshot cannot be written.
        """


class InMemoryCacheStore(CacheStore):
    """Store that keeps the last snapshot in memory.

    Useful for embedders that manage persistence themselves.
    """

    def __init__(self, artifacts: list[Artifact] | None = None) -> None:
        self._artifacts: list[Artifact] = [
            a.model_copy(deep=True) for a in artifacts or []
        ]
        self.write_count = 0

    def read(self) -> list[Artifact]:
        return [a.model_copy(deep=True) for a in self._artifacts]

    def write(self, artifacts: list[Artifact]) -> None:
        self._artifacts = [a.model_copy(deep=True) for a in artifacts]
        self.write_count += 1


class JsonFileCacheStore(CacheStore):
    """Store that keeps the cache as a JSON list of artifacts in one file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def read(self) -> list[Artifact]:
        if not self.path.exists():
            return []
        try:
            content = self.path.read_bytes()
        except OSError as e:
            raise CacheStoreError(f"Cannot read cache file '{self.path}': {e}") from e
        if not content.strip():
            return []
        try:
            return _ARTIFACTS.validate_json(content)
        except ValidationError as e:
            raise CacheStoreError(
                f"Invalid cache file '{self.path}': {e.error_count()} validation errors"
            ) from e

    def write(self, artifacts: list[Artifact]) -> None:
        ordered = sorted(artifacts, key=lambda a: a.component_id)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(_ARTIFACTS.dump_json(ordered, indent=2))
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise CacheStoreError(f"Cannot write cache file '{self.path}': {e}") from e
        log.debug("cache.written", path=str(self.path), artifacts=len(ordered))
