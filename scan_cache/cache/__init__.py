"""Per-component scan result cache."""

from scan_cache.cache.artifact_cache import ArtifactCache
from scan_cache.cache.merger import ResultMerger
from scan_cache.cache.store import CacheStore, InMemoryCacheStore, JsonFileCacheStore

__all__ = [
    "ArtifactCache",
    "CacheStore",
    "InMemoryCacheStore",
    "JsonFileCacheStore",
    "ResultMerger",
]
