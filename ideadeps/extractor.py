"""Dependency extraction — turn bucket declarations into identified dependencies."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, TypeVar, runtime_checkable

from ideadeps.buckets import Bucket
from ideadeps.models import (
    Declaration,
    LocalFile,
    LocalFileDependency,
    ProjectDependency,
    ProjectRef,
    RepoArtifact,
    RepoFileDependency,
    UnresolvedRepoDependency,
)
from ideadeps.repository import ArtifactRepository, LocalMavenRepository

D = TypeVar("D", ProjectRef, RepoArtifact, LocalFile)


@runtime_checkable
class DependencyExtractor(Protocol):
    """Interface the membership indexer and unresolved collector consume.

    Every method returns what is declared in (or inherited by) any ``plus``
    bucket and in none of the ``minus`` buckets.
    """

    def extract_project_dependencies(
        self, plus: Sequence[Bucket], minus: Sequence[Bucket]
    ) -> list[ProjectDependency]: ...

    def extract_repo_file_dependencies(
        self,
        plus: Sequence[Bucket],
        minus: Sequence[Bucket],
        download_sources: bool,
        download_javadoc: bool,
    ) -> list[RepoFileDependency]: ...

    def extract_local_file_dependencies(
        self, plus: Sequence[Bucket], minus: Sequence[Bucket]
    ) -> list[LocalFileDependency]: ...

    def unresolved_external_dependencies(
        self, plus: Sequence[Bucket], minus: Sequence[Bucket]
    ) -> list[UnresolvedRepoDependency]: ...


def _matching(plus: Sequence[Bucket], minus: Sequence[Bucket], kind: type[D]) -> list[D]:
    excluded: set[Declaration] = {d for b in minus for d in b.all_declarations()}
    found = dict.fromkeys(
        d
        for b in plus
        for d in b.all_declarations()
        if isinstance(d, kind) and d not in excluded
    )
    return list(found)


def module_name(project_path: str) -> str:
    """IDE module name for a project path: ``":libs:core"`` -> ``"core"``."""
    return project_path.rstrip(":").rsplit(":", 1)[-1] or "root"


class DeclarationExtractor:
    """Extractor backed by bucket declarations and an artifact repository."""

    def __init__(
        self,
        repository: ArtifactRepository | None = None,
        base_dir: Path | str | None = None,
    ) -> None:
        self.repository = repository if repository is not None else LocalMavenRepository()
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    def extract_project_dependencies(
        self, plus: Sequence[Bucket], minus: Sequence[Bucket]
    ) -> list[ProjectDependency]:
        return [
            ProjectDependency(project_path=ref.path, module_name=module_name(ref.path))
            for ref in _matching(plus, minus, ProjectRef)
        ]

    def extract_repo_file_dependencies(
        self,
        plus: Sequence[Bucket],
        minus: Sequence[Bucket],
        download_sources: bool,
        download_javadoc: bool,
    ) -> list[RepoFileDependency]:
        deps: list[RepoFileDependency] = []
        for artifact in _matching(plus, minus, RepoArtifact):
            resolved = self.repository.resolve(
                artifact, sources=download_sources, javadoc=download_javadoc
            )
            if resolved is None:
                continue
            deps.append(
                RepoFileDependency(
                    coordinate=artifact,
                    file=resolved.file,
                    source_files=resolved.sources,
                    javadoc_files=resolved.javadoc,
                    download_sources=download_sources,
                    download_javadoc=download_javadoc,
                )
            )
        return deps

    def extract_local_file_dependencies(
        self, plus: Sequence[Bucket], minus: Sequence[Bucket]
    ) -> list[LocalFileDependency]:
        return [
            LocalFileDependency(file=self.normalize(decl.path))
            for decl in _matching(plus, minus, LocalFile)
        ]

    def unresolved_external_dependencies(
        self, plus: Sequence[Bucket], minus: Sequence[Bucket]
    ) -> list[UnresolvedRepoDependency]:
        unresolved: list[UnresolvedRepoDependency] = []
        for artifact in _matching(plus, minus, RepoArtifact):
            if not artifact.version:
                unresolved.append(UnresolvedRepoDependency(artifact, reason="version missing"))
            elif self.repository.resolve(artifact) is None:
                unresolved.append(UnresolvedRepoDependency(artifact))
        return unresolved

    def normalize(self, path: str) -> Path:
        """Absolute, normalized path; relative paths resolve against ``base_dir``."""
        return Path(os.path.abspath(self.base_dir / Path(path).expanduser()))
