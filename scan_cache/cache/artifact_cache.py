"""In-memory artifact cache keyed by normalized component identifier."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Optional

import structlog

from scan_cache.cache.store import CacheStore, InMemoryCacheStore
from scan_cache.models.artifact import Artifact, GeneralInfo, License
from scan_cache.models.dependency import strip_component_prefix

log = structlog.get_logger("scan_cache.cache")


class ArtifactCache:
    """Scan results of previously scanned components.

    The cache is owned by the caller and shared across scans. It assumes a
    single writer: concurrent scans against the same instance must be
    serialized by the caller.
    """

    def __init__(self, store: Optional[CacheStore] = None) -> None:
        self._store = store if store is not None else InMemoryCacheStore()
        self._artifacts: dict[str, Artifact] = {}

    @classmethod
    def load(cls, store: CacheStore) -> ArtifactCache:
        """Create a cache populated from its store.

        Args:
            store: Backing store to read from and later write to.

        Returns:
            ArtifactCache holding every persisted artifact.
        """
        cache = cls(store)
        for artifact in store.read():
            cache.add(artifact)
        log.debug("cache.loaded", artifacts=len(cache))
        return cache

    def __len__(self) -> int:
        return len(self._artifacts)

    def __contains__(self, component_id: object) -> bool:
        return isinstance(component_id, str) and self.contains(component_id)

    def __iter__(self) -> Iterator[Artifact]:
        return iter(list(self._artifacts.values()))

    def get(self, component_id: str) -> Optional[Artifact]:
        """Get the cached artifact of a component.

        Args:
            component_id: Component identifier, with or without scheme.

        Returns:
            The cached Artifact, or None if the component was never scanned.
        """
        return self._artifacts.get(strip_component_prefix(component_id))

    def contains(self, component_id: str) -> bool:
        """Check whether a component has a cached artifact."""
        return strip_component_prefix(component_id) in self._artifacts

    def add(self, artifact: Artifact) -> None:
        """Insert an artifact, replacing any artifact cached under the same key.

        Args:
            artifact: Artifact to cache. Its component identifier is
                normalized before use as the key.
        """
        key = strip_component_prefix(artifact.component_id)
        if key != artifact.component_id:
            info = artifact.general_info.model_copy(update={"component_id": key})
            artifact = artifact.model_copy(update={"general_info": info})
        self._artifacts[key] = artifact

    def write(self) -> None:
        """Flush the cache to its backing store.

        Raises:
            CacheStoreError: If the store cannot be written.
        """
        self._store.write(list(self._artifacts.values()))

    def get_summary(self, component_id: str) -> Artifact:
        """Get the scan summary of a component for display.

        Every summary carries at least one license: components without a
        detected license get the "Unknown" placeholder license. Issues are
        never altered.

        Args:
            component_id: Component identifier, with or without scheme.

        Returns:
            The cached Artifact, or a new Artifact with no issues and the
            placeholder license if the component is not cached.
        """
        artifact = self.get(component_id)
        if artifact is None:
            key = strip_component_prefix(component_id)
            return Artifact(
                general_info=GeneralInfo(component_id=key),
                licenses={License()},
            )
        if not artifact.licenses:
            # No license detected by the service
            artifact.licenses.add(License())
        return artifact
