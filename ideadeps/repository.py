"""Artifact repository — resolve coordinates against a local Maven-layout directory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from ideadeps.models import RepoArtifact

log = structlog.get_logger("ideadeps.repository")


@dataclass(frozen=True)
class ResolvedArtifact:
    """Files found for one coordinate."""

    file: Path
    sources: tuple[Path, ...] = ()
    javadoc: tuple[Path, ...] = ()


@runtime_checkable
class ArtifactRepository(Protocol):
    """Interface every artifact repository must satisfy."""

    def resolve(
        self, artifact: RepoArtifact, *, sources: bool = False, javadoc: bool = False
    ) -> ResolvedArtifact | None: ...


def default_repository_root() -> Path:
    """``$IDEADEPS_MAVEN_REPO`` if set, else ``~/.m2/repository``."""
    configured = os.environ.get("IDEADEPS_MAVEN_REPO")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".m2" / "repository"


class LocalMavenRepository:
    """Looks up ``group/as/dirs/name/version/name-version[-classifier].jar``.

    Attachments (``-sources.jar``, ``-javadoc.jar``) are only looked up when
    requested. Nothing is ever downloaded.
    """

    def __init__(self, root: Path | str | None = None) -> None:
        self.root = Path(root) if root is not None else default_repository_root()

    def artifact_dir(self, artifact: RepoArtifact) -> Path:
        return self.root.joinpath(*artifact.group.split("."), artifact.name, artifact.version or "")

    def resolve(
        self, artifact: RepoArtifact, *, sources: bool = False, javadoc: bool = False
    ) -> ResolvedArtifact | None:
        if not artifact.version:
            log.debug("repository.version_missing", artifact=artifact.notation)
            return None

        base = self.artifact_dir(artifact)
        stem = f"{artifact.name}-{artifact.version}"
        jar_name = f"{stem}-{artifact.classifier}.jar" if artifact.classifier else f"{stem}.jar"
        main = base / jar_name
        if not main.is_file():
            log.debug("repository.artifact_missing", artifact=artifact.notation, path=str(main))
            return None

        return ResolvedArtifact(
            file=main,
            sources=self._attachment(base, stem, "sources") if sources else (),
            javadoc=self._attachment(base, stem, "javadoc") if javadoc else (),
        )

    @staticmethod
    def _attachment(base: Path, stem: str, kind: str) -> tuple[Path, ...]:
        candidate = base / f"{stem}-{kind}.jar"
        return (candidate,) if candidate.is_file() else ()
