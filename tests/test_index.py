"""Tests for the membership index."""

from __future__ import annotations

from collections import Counter

from ideadeps.buckets import Bucket, BucketRegistry
from ideadeps.index import build_index, indexed_buckets
from ideadeps.models import ArtifactKey, FileKey, LocalFile, ProjectKey, ProjectRef
from ideadeps.rules import effective_rules
from ideadeps.testing import FakeRepository, RecordingExtractor, artifact, flat_registry


def _full_registry() -> BucketRegistry:
    return flat_registry(
        compileOnly=[artifact("lombok")],
        compileClasspath=[artifact("guava"), ProjectRef(":core")],
        runtimeClasspath=[artifact("guava"), artifact("pg"), LocalFile("libs/a.jar")],
        implementation=[artifact("guava")],
        apiElements=[],
        testCompileClasspath=[artifact("junit")],
        testRuntimeClasspath=[artifact("junit")],
        kapt=[artifact("dagger-compiler")],
    )


class TestIndexedBuckets:
    def test_union_in_scope_order_plus_before_minus(self):
        rules = effective_rules(_full_registry())
        names = [b.name for b in indexed_buckets(rules)]
        assert names == [
            "compileOnly",
            "implementation",
            "apiElements",
            "compileClasspath",
            "testCompileClasspath",
            "testRuntimeClasspath",
            "runtimeClasspath",
        ]

    def test_unreferenced_bucket_not_indexed(self):
        rules = effective_rules(_full_registry())
        assert "kapt" not in [b.name for b in indexed_buckets(rules)]

    def test_override_bucket_is_indexed(self):
        class Override:
            plus = ["kapt"]
            minus: list[str] = []

        rules = effective_rules(_full_registry(), {"PROVIDED": Override()})
        assert "kapt" in [b.name for b in indexed_buckets(rules)]


class TestBuildIndex:
    def test_each_bucket_extracted_once_per_kind(self, extractor):
        registry = _full_registry()
        rules = effective_rules(registry)
        build_index(rules, extractor)

        counts = Counter(extractor.calls)
        assert all(n == 1 for n in counts.values())
        # runtimeClasspath is plus for RUNTIME and minus for TEST
        assert counts[("repository", ("runtimeClasspath",))] == 1
        for kind in ("project", "repository", "file"):
            assert len(extractor.kinds(kind)) == len(indexed_buckets(rules))

    def test_extraction_uses_single_bucket_without_minus(self, extractor):
        build_index(effective_rules(_full_registry()), extractor)
        assert all(len(names) == 1 for _, names in extractor.calls)

    def test_membership_accumulates_across_buckets(self, extractor):
        registry = _full_registry()
        index = build_index(effective_rules(registry), extractor)

        guava = ArtifactKey("org.example", "guava", "1.0", None, False, False)
        assert [b.name for b in index.buckets_of(guava)] == [
            "implementation",
            "compileClasspath",
            "runtimeClasspath",
        ]

    def test_all_kinds_indexed(self, extractor):
        index = build_index(effective_rules(_full_registry()), extractor)
        assert ProjectKey(":core") in index
        assert FileKey(extractor.normalize("libs/a.jar")) in index
        assert not any(
            isinstance(k, ArtifactKey) and k.name == "dagger-compiler" for k in index
        )

    def test_first_payload_is_kept(self, extractor):
        index = build_index(effective_rules(_full_registry()), extractor)
        entry = index.entries[ProjectKey(":core")]
        assert entry.dependency.module_name == "core"

    def test_offline_skips_repository_extraction(self, extractor):
        index = build_index(effective_rules(_full_registry()), extractor, offline=True)

        assert extractor.kinds("repository") == []
        assert not any(isinstance(k, ArtifactKey) for k in index)
        assert ProjectKey(":core") in index
        assert any(isinstance(k, FileKey) for k in index)

    def test_unresolved_artifacts_not_indexed(self):
        extractor = RecordingExtractor(repository=FakeRepository(missing={"org.example:pg:1.0"}))
        index = build_index(effective_rules(_full_registry()), extractor)
        assert not any(isinstance(k, ArtifactKey) and k.name == "pg" for k in index)

    def test_download_flags_part_of_identity(self):
        registry = flat_registry(compileClasspath=[artifact("guava")])
        rules = effective_rules(registry)
        plain = build_index(rules, RecordingExtractor())
        with_sources = build_index(rules, RecordingExtractor(), download_sources=True)
        assert set(plain) != set(with_sources)

    def test_inherited_and_detached_copy_are_distinct_buckets(self, extractor):
        base = Bucket("implementation", [artifact("guava")])
        classpath = Bucket("compileClasspath", extends_from=[base])
        snapshot = classpath.copy()
        registry = BucketRegistry([base, classpath, snapshot])

        class Override:
            plus = [snapshot.name]
            minus: list[str] = []

        index = build_index(effective_rules(registry, {"COMPILE": Override()}), extractor)
        (key,) = list(index)
        buckets = index.buckets_of(key)
        assert classpath in buckets and snapshot in buckets
        assert len(buckets) == 3

    def test_fresh_index_per_call(self, extractor):
        rules = effective_rules(_full_registry())
        assert build_index(rules, extractor) is not build_index(rules, extractor)
