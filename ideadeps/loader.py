"""Load a module's buckets from its build file."""

from __future__ import annotations

from pathlib import Path

import structlog

# Ensure parsers are registered before any load runs.
import ideadeps.parsers  # noqa: F401
from ideadeps.buckets import BucketRegistry
from ideadeps.build_files import discover_build_file
from ideadeps.exceptions import BuildFileError

log = structlog.get_logger("ideadeps.loader")


def load_buckets(project_dir: Path | str) -> BucketRegistry:
    """Parse the build file in ``project_dir`` into a bucket registry."""
    root = Path(project_dir)
    match = discover_build_file(root)
    if match is None:
        raise BuildFileError(f"No build file found in {root}")

    parser, file_path = match
    try:
        content = file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise BuildFileError(f"Cannot read {file_path}: {e}") from e

    registry = parser.parse(file_path, content)
    log.info(
        "loader.buckets_loaded",
        build_file=str(file_path),
        build_system=parser.build_system,
        buckets=len(registry),
    )
    return registry
