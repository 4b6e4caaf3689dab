"""Test doubles for ideadeps — use in unit / integration tests.

Usage::

    from ideadeps.testing import FakeRepository, RecordingExtractor, artifact, flat_registry

    repo = FakeRepository()                           # every versioned coordinate resolves
    repo = FakeRepository(missing={"org.x:y:1.0"})    # these notations stay unresolved
    extractor = RecordingExtractor(repository=repo)   # records every extraction call
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from ideadeps.buckets import Bucket, BucketRegistry
from ideadeps.extractor import DeclarationExtractor
from ideadeps.models import (
    Declaration,
    LocalFileDependency,
    ProjectDependency,
    RepoArtifact,
    RepoFileDependency,
    UnresolvedRepoDependency,
)
from ideadeps.repository import ResolvedArtifact


class FakeRepository:
    """Resolves coordinates to files under ``root`` without touching the disk.

    Parameters
    ----------
    missing:
        Notations (``group:name:version``) that never resolve.
    root:
        Directory the fake jar paths are placed under.
    """

    def __init__(self, missing: Iterable[str] = (), root: Path | str = "/repo") -> None:
        self.missing = set(missing)
        self.root = Path(root)
        self.lookups: list[str] = []

    def resolve(
        self, artifact: RepoArtifact, *, sources: bool = False, javadoc: bool = False
    ) -> ResolvedArtifact | None:
        self.lookups.append(artifact.notation)
        if not artifact.version or artifact.notation in self.missing:
            return None
        stem = f"{artifact.name}-{artifact.version}"
        return ResolvedArtifact(
            file=self.root / f"{stem}.jar",
            sources=(self.root / f"{stem}-sources.jar",) if sources else (),
            javadoc=(self.root / f"{stem}-javadoc.jar",) if javadoc else (),
        )


class RecordingExtractor(DeclarationExtractor):
    """DeclarationExtractor that records ``(kind, plus bucket names)`` per call."""

    def __init__(self, repository: FakeRepository | None = None, base_dir: Path | str = "/module") -> None:
        super().__init__(repository=repository or FakeRepository(), base_dir=base_dir)
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def _record(self, kind: str, plus: Sequence[Bucket]) -> None:
        self.calls.append((kind, tuple(b.name for b in plus)))

    def extract_project_dependencies(
        self, plus: Sequence[Bucket], minus: Sequence[Bucket]
    ) -> list[ProjectDependency]:
        self._record("project", plus)
        return super().extract_project_dependencies(plus, minus)

    def extract_repo_file_dependencies(
        self,
        plus: Sequence[Bucket],
        minus: Sequence[Bucket],
        download_sources: bool,
        download_javadoc: bool,
    ) -> list[RepoFileDependency]:
        self._record("repository", plus)
        return super().extract_repo_file_dependencies(
            plus, minus, download_sources, download_javadoc
        )

    def extract_local_file_dependencies(
        self, plus: Sequence[Bucket], minus: Sequence[Bucket]
    ) -> list[LocalFileDependency]:
        self._record("file", plus)
        return super().extract_local_file_dependencies(plus, minus)

    def unresolved_external_dependencies(
        self, plus: Sequence[Bucket], minus: Sequence[Bucket]
    ) -> list[UnresolvedRepoDependency]:
        self._record("unresolved", plus)
        return super().unresolved_external_dependencies(plus, minus)

    def kinds(self, kind: str) -> list[tuple[str, ...]]:
        """Plus-bucket names of every call of one kind, in call order."""
        return [names for k, names in self.calls if k == kind]


def artifact(name: str, version: str = "1.0", group: str = "org.example") -> RepoArtifact:
    """Shorthand coordinate for tests."""
    return RepoArtifact(group=group, name=name, version=version)


def flat_registry(**contents: Iterable[Declaration]) -> BucketRegistry:
    """Registry of hierarchy-free buckets, e.g. ``flat_registry(compileClasspath=[...])``."""
    return BucketRegistry(
        Bucket(name=name, declarations=list(decls)) for name, decls in contents.items()
    )
