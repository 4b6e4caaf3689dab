"""Parser registry — find a module's build file and match it to a parser."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from ideadeps.buckets import BucketRegistry


@runtime_checkable
class BuildFileParser(Protocol):
    """Interface that every build file parser must satisfy."""

    build_system: str
    file_patterns: list[str]

    def parse(self, file_path: Path, content: str) -> BucketRegistry: ...


PARSER_REGISTRY: dict[str, BuildFileParser] = {}


def register_parser(parser: BuildFileParser) -> None:
    """Register a parser instance by its build_system."""
    PARSER_REGISTRY[parser.build_system] = parser


def discover_build_file(project_dir: Path) -> tuple[BuildFileParser, Path] | None:
    """First (parser, build file) pair found directly in ``project_dir``."""
    for parser in PARSER_REGISTRY.values():
        for pattern in parser.file_patterns:
            for hit in sorted(project_dir.glob(pattern)):
                if hit.is_file():
                    return parser, hit
    return None
