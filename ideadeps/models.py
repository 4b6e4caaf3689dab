"""Data models for scope resolution.

Three tagged unions flow through the pipeline:

- ``Declaration``: what a bucket declares (project, repository coordinate, file)
- ``ExtractedDependency``: what the extractor produced for a declaration,
  each exposing the ``DependencyKey`` that identifies it
- ``ResolvedDependency``: the per-scope records handed to the project writer
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Union

from ideadeps.exceptions import UnknownScopeError

if TYPE_CHECKING:
    from ideadeps.descriptor import PathFactory


class Scope(Enum):
    """IDE classpath scope. Each primitive scope carries exactly one label."""

    PROVIDED = "PROVIDED"
    COMPILE = "COMPILE"
    TEST = "TEST"
    RUNTIME = "RUNTIME"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> Scope:
        try:
            return cls(label.strip().upper())
        except ValueError:
            raise UnknownScopeError(label) from None


# Processing order. Output order within one identity follows it too.
PRIMITIVE_SCOPES: tuple[Scope, ...] = (
    Scope.PROVIDED,
    Scope.COMPILE,
    Scope.TEST,
    Scope.RUNTIME,
)

# Composite names that leaked into the mapping-rule DSL as string constants.
# Accepted as override keys, never matched.
LEGACY_SCOPE_ALIASES: dict[str, tuple[str, ...]] = {
    "PROVIDED_TEST": ("PROVIDED", "TEST"),
    "RUNTIME_COMPILE_CLASSPATH": ("PROVIDED", "RUNTIME"),
    "RUNTIME_TEST_COMPILE_CLASSPATH": ("PROVIDED", "TEST"),
    "RUNTIME_TEST": ("RUNTIME", "TEST"),
    "COMPILE_CLASSPATH": ("PROVIDED",),
}


@dataclass(frozen=True)
class FilePath:
    """Portable path as written into IDE metadata."""

    path: str  # absolute, or with a $VARIABLE$ prefix
    url: str  # file://... or jar://...!/
    canonical_url: str  # same url with variables expanded


# ── Declarations ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ProjectRef:
    """Reference to another build unit, e.g. ``project(":core")``."""

    path: str


@dataclass(frozen=True)
class RepoArtifact:
    """Requested repository coordinate."""

    group: str
    name: str
    version: str | None = None
    classifier: str | None = None

    @property
    def notation(self) -> str:
        parts = [self.group, self.name]
        if self.version:
            parts.append(self.version)
        if self.classifier:
            parts.append(self.classifier)
        return ":".join(parts)


@dataclass(frozen=True)
class LocalFile:
    """A file declared directly, e.g. ``files("libs/a.jar")``."""

    path: str


Declaration = Union[ProjectRef, RepoArtifact, LocalFile]


# ── Identity ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ProjectKey:
    path: str


@dataclass(frozen=True)
class ArtifactKey:
    group: str
    name: str
    version: str | None
    classifier: str | None
    download_sources: bool
    download_javadoc: bool


@dataclass(frozen=True)
class FileKey:
    path: Path  # normalized absolute


DependencyKey = Union[ProjectKey, ArtifactKey, FileKey]


# ── Output records ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class ModuleDependency:
    """Dependency on another IDE module."""

    name: str
    scope: str
    key: DependencyKey | None = None


@dataclass(frozen=True)
class SingleEntryModuleLibrary:
    """Module-level library with a single classpath entry.

    ``key`` is None for libraries injected from explicit directory overrides,
    so they never collapse into a record produced by bucket matching.
    """

    library_file: FilePath
    scope: str
    javadoc: tuple[FilePath, ...] = ()
    sources: tuple[FilePath, ...] = ()
    module_version: str | None = None
    key: DependencyKey | None = None


ResolvedDependency = Union[ModuleDependency, SingleEntryModuleLibrary]


# ── Extracted dependencies ───────────────────────────────────────────────


@dataclass(frozen=True)
class ProjectDependency:
    project_path: str
    module_name: str

    @property
    def key(self) -> ProjectKey:
        return ProjectKey(self.project_path)

    def build(self, scope: str, path_factory: PathFactory) -> ModuleDependency:
        return ModuleDependency(name=self.module_name, scope=scope, key=self.key)


@dataclass(frozen=True)
class RepoFileDependency:
    coordinate: RepoArtifact
    file: Path
    source_files: tuple[Path, ...] = ()
    javadoc_files: tuple[Path, ...] = ()
    download_sources: bool = False
    download_javadoc: bool = False

    @property
    def key(self) -> ArtifactKey:
        c = self.coordinate
        return ArtifactKey(
            group=c.group,
            name=c.name,
            version=c.version,
            classifier=c.classifier,
            download_sources=self.download_sources,
            download_javadoc=self.download_javadoc,
        )

    def build(self, scope: str, path_factory: PathFactory) -> SingleEntryModuleLibrary:
        return SingleEntryModuleLibrary(
            library_file=path_factory.path(self.file),
            scope=scope,
            javadoc=tuple(path_factory.path(f) for f in self.javadoc_files),
            sources=tuple(path_factory.path(f) for f in self.source_files),
            module_version=self.coordinate.notation,
            key=self.key,
        )


@dataclass(frozen=True)
class LocalFileDependency:
    file: Path

    @property
    def key(self) -> FileKey:
        return FileKey(self.file)

    def build(self, scope: str, path_factory: PathFactory) -> SingleEntryModuleLibrary:
        return SingleEntryModuleLibrary(
            library_file=path_factory.path(self.file), scope=scope, key=self.key
        )


ExtractedDependency = Union[ProjectDependency, RepoFileDependency, LocalFileDependency]


@dataclass(frozen=True)
class UnresolvedRepoDependency:
    """Repository coordinate that could not be resolved to a file."""

    coordinate: RepoArtifact
    reason: str = "not found"

    @property
    def display_name(self) -> str:
        return self.coordinate.notation


@dataclass
class ResolutionResult:
    """Everything one resolution pass produces for a module."""

    dependencies: list[ResolvedDependency] = field(default_factory=list)
    unresolved: list[UnresolvedRepoDependency] = field(default_factory=list)

    def by_scope(self) -> dict[str, list[ResolvedDependency]]:
        grouped: dict[str, list[ResolvedDependency]] = {}
        for dep in self.dependencies:
            grouped.setdefault(dep.scope, []).append(dep)
        return grouped
