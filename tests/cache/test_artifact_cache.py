"""Tests for the artifact cache."""
from scan_cache.cache import ArtifactCache, InMemoryCacheStore
from scan_cache.models.artifact import Artifact, GeneralInfo, Issue, License, Severity


def _artifact(component_id: str, **kwargs: object) -> Artifact:
    return Artifact(general_info=GeneralInfo(component_id=component_id), **kwargs)


class TestArtifactCache:
    """Tests for ArtifactCache lookups and inserts."""

    def test_empty_cache(self, cache: ArtifactCache) -> None:
        """Test that a new cache holds nothing."""
        assert len(cache) == 0
        assert cache.get("left-pad:1.3.0") is None
        assert cache.contains("left-pad:1.3.0") is False

    def test_add_and_get(self, cache: ArtifactCache) -> None:
        """Test that an added artifact can be looked up."""
        artifact = _artifact("left-pad:1.3.0")
        cache.add(artifact)

        assert cache.get("left-pad:1.3.0") is artifact
        assert cache.contains("left-pad:1.3.0") is True
        assert "left-pad:1.3.0" in cache

    def test_lookup_accepts_scheme(self, cache: ArtifactCache) -> None:
        """Test that scheme-prefixed ids resolve to the normalized key."""
        cache.add(_artifact("left-pad:1.3.0"))

        assert cache.contains("npm://left-pad:1.3.0") is True
        assert cache.get("npm://left-pad:1.3.0") is not None

    def test_add_normalizes_key(self, cache: ArtifactCache) -> None:
        """Test that artifacts are always stored under a normalized key."""
        cache.add(_artifact("npm://left-pad:1.3.0"))

        stored = cache.get("left-pad:1.3.0")
        assert stored is not None
        assert stored.component_id == "left-pad:1.3.0"

    def test_add_replaces(self, cache: ArtifactCache) -> None:
        """Test that adding under an existing key replaces the artifact."""
        cache.add(_artifact("a:1.0.0", issues={Issue(summary="old")}))
        cache.add(_artifact("a:1.0.0"))

        stored = cache.get("a:1.0.0")
        assert stored is not None
        assert stored.issues == set()
        assert len(cache) == 1

    def test_contains_rejects_non_strings(self, cache: ArtifactCache) -> None:
        """Test membership with a non-string."""
        assert 42 not in cache

    def test_iterates_artifacts(self, cache: ArtifactCache) -> None:
        """Test iteration over cached artifacts."""
        cache.add(_artifact("a:1.0.0"))
        cache.add(_artifact("b:1.0.0"))

        assert sorted(a.component_id for a in cache) == ["a:1.0.0", "b:1.0.0"]


class TestWriteAndLoad:
    """Tests for persisting the cache through its store."""

    def test_write_flushes_to_store(
        self, cache: ArtifactCache, store: InMemoryCacheStore
    ) -> None:
        """Test that write() hands all artifacts to the store."""
        cache.add(_artifact("a:1.0.0"))
        cache.add(_artifact("b:1.0.0"))

        cache.write()

        assert store.write_count == 1
        assert sorted(a.component_id for a in store.read()) == ["a:1.0.0", "b:1.0.0"]

    def test_load_reads_store(self) -> None:
        """Test that load() restores persisted artifacts."""
        store = InMemoryCacheStore(
            [_artifact("a:1.0.0", licenses={License(name="MIT", key="MIT")})]
        )

        cache = ArtifactCache.load(store)

        assert cache.contains("a:1.0.0")
        stored = cache.get("a:1.0.0")
        assert stored is not None
        assert stored.licenses == {License(name="MIT", key="MIT")}

    def test_default_store_is_in_memory(self) -> None:
        """Test that a cache without store can still be written."""
        cache = ArtifactCache()
        cache.add(_artifact("a:1.0.0"))

        cache.write()


class TestGetSummary:
    """Tests for ArtifactCache.get_summary."""

    def test_unknown_component(self, cache: ArtifactCache) -> None:
        """Test that unknown ids get no issues and one Unknown license."""
        summary = cache.get_summary("npm://left-pad:1.3.0")

        assert summary.component_id == "left-pad:1.3.0"
        assert summary.issues == set()
        assert len(summary.licenses) == 1
        assert next(iter(summary.licenses)).is_unknown

    def test_unknown_component_not_cached(self, cache: ArtifactCache) -> None:
        """Test that summarizing an unknown id does not insert it."""
        cache.get_summary("left-pad:1.3.0")

        assert cache.contains("left-pad:1.3.0") is False

    def test_known_component_without_license(self, cache: ArtifactCache) -> None:
        """Test that known ids without licenses get the placeholder license."""
        issue = Issue(severity=Severity.MAJOR, summary="ReDoS")
        cache.add(_artifact("a:1.0.0", issues={issue}))

        summary = cache.get_summary("a:1.0.0")

        assert summary.issues == {issue}
        assert summary.licenses == {License()}

    def test_known_component_with_license(self, cache: ArtifactCache) -> None:
        """Test that detected licenses are returned untouched."""
        mit = License(name="MIT License", key="MIT")
        cache.add(_artifact("a:1.0.0", licenses={mit}))

        summary = cache.get_summary("a:1.0.0")

        assert summary.licenses == {mit}

    def test_placeholder_added_once(self, cache: ArtifactCache) -> None:
        """Test that repeated summaries do not grow the license set."""
        cache.add(_artifact("a:1.0.0"))

        cache.get_summary("a:1.0.0")
        summary = cache.get_summary("a:1.0.0")

        assert len(summary.licenses) == 1
