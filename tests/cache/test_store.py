"""Tests for cache stores."""
import json
from pathlib import Path

import pytest

from scan_cache.cache.store import InMemoryCacheStore, JsonFileCacheStore
from scan_cache.exceptions import CacheStoreError
from scan_cache.models.artifact import Artifact, GeneralInfo, Issue, License, Severity


def _artifact(component_id: str) -> Artifact:
    return Artifact(
        general_info=GeneralInfo(
            component_id=component_id, path="project", pkg_type="npm"
        ),
        issues={
            Issue(
                severity=Severity.HIGH,
                summary="Prototype pollution",
                fixed_versions=frozenset({"1.3.1"}),
                cve="CVE-2020-0001",
            )
        },
        licenses={License(name="MIT License", key="MIT")},
    )


class TestInMemoryCacheStore:
    """Tests for InMemoryCacheStore."""

    def test_empty_by_default(self) -> None:
        """Test that a new store holds nothing."""
        assert InMemoryCacheStore().read() == []

    def test_write_replaces_snapshot(self) -> None:
        """Test that each write replaces the previous snapshot."""
        store = InMemoryCacheStore()
        store.write([_artifact("a:1.0.0"), _artifact("b:1.0.0")])
        store.write([_artifact("c:1.0.0")])

        assert [a.component_id for a in store.read()] == ["c:1.0.0"]
        assert store.write_count == 2

    def test_snapshot_is_isolated(self) -> None:
        """Test that later changes to written artifacts do not leak in."""
        store = InMemoryCacheStore()
        artifact = _artifact("a:1.0.0")
        store.write([artifact])

        artifact.licenses.clear()

        assert len(store.read()[0].licenses) == 1


class TestJsonFileCacheStore:
    """Tests for JsonFileCacheStore."""

    def test_missing_file_reads_empty(self, tmp_path: Path) -> None:
        """Test that a cache that was never written is empty."""
        assert JsonFileCacheStore(tmp_path / "cache.json").read() == []

    def test_empty_file_reads_empty(self, tmp_path: Path) -> None:
        """Test that an empty file is an empty cache."""
        path = tmp_path / "cache.json"
        path.write_text("")

        assert JsonFileCacheStore(path).read() == []

    def test_write_then_read(self, tmp_path: Path) -> None:
        """Test that written artifacts are read back equal."""
        store = JsonFileCacheStore(tmp_path / "cache.json")
        store.write([_artifact("b:1.0.0"), _artifact("a:1.0.0")])

        restored = store.read()

        assert [a.component_id for a in restored] == ["a:1.0.0", "b:1.0.0"]
        assert restored[0].issues == _artifact("a:1.0.0").issues
        assert restored[0].licenses == _artifact("a:1.0.0").licenses

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        """Test that missing parent directories are created."""
        path = tmp_path / "nested" / "dir" / "cache.json"
        JsonFileCacheStore(path).write([_artifact("a:1.0.0")])

        assert path.exists()
        assert not path.with_name("cache.json.tmp").exists()

    def test_file_is_json_list(self, tmp_path: Path) -> None:
        """Test the on-disk layout of the cache."""
        path = tmp_path / "cache.json"
        JsonFileCacheStore(path).write([_artifact("a:1.0.0")])

        data = json.loads(path.read_text())

        assert isinstance(data, list)
        assert data[0]["general_info"]["component_id"] == "a:1.0.0"
        assert data[0]["issues"][0]["severity"] == "High"
        assert data[0]["issues"][0]["fixed_versions"] == ["1.3.1"]

    def test_invalid_content_raises(self, tmp_path: Path) -> None:
        """Test that a corrupt cache file raises CacheStoreError."""
        path = tmp_path / "cache.json"
        path.write_text('{"not": "a list"}')

        with pytest.raises(CacheStoreError, match="Invalid cache file"):
            JsonFileCacheStore(path).read()

    def test_unwritable_location_raises(self, tmp_path: Path) -> None:
        """Test that write failures raise CacheStoreError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")

        with pytest.raises(CacheStoreError, match="Cannot write"):
            JsonFileCacheStore(blocker / "cache.json").write([])
