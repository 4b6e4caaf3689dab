"""Module descriptor — per-module resolution settings and the path factory."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from ideadeps.exceptions import DescriptorError, UnknownScopeError
from ideadeps.models import LEGACY_SCOPE_ALIASES, FilePath, Scope

_ARCHIVE_SUFFIXES = (".jar", ".zip")


def _url(path: str, file: Path) -> str:
    if file.suffix.lower() in _ARCHIVE_SUFFIXES:
        return f"jar://{path}!/"
    return f"file://{path}"


class PathFactory:
    """Converts absolute files into portable ``FilePath`` values.

    The longest variable directory containing a file replaces that prefix
    with ``$NAME$``; files outside every variable keep their absolute path.
    """

    def __init__(self, variables: Mapping[str, Path | str] | None = None) -> None:
        resolved = [(name, Path(os.path.abspath(p))) for name, p in (variables or {}).items()]
        self._variables = sorted(resolved, key=lambda item: len(item[1].parts), reverse=True)

    def path(self, file: Path | str) -> FilePath:
        absolute = Path(os.path.abspath(file))
        expanded = absolute.as_posix()
        portable = expanded
        for name, root in self._variables:
            try:
                relative = absolute.relative_to(root)
            except ValueError:
                continue
            portable = f"${name}$/{relative.as_posix()}" if relative.parts else f"${name}$"
            break
        return FilePath(
            path=portable,
            url=_url(portable, absolute),
            canonical_url=_url(expanded, absolute),
        )


class ScopeOverride(BaseModel):
    """Bucket names added to, and subtracted from, a scope's defaults."""

    plus: list[str] = Field(default_factory=list)
    minus: list[str] = Field(default_factory=list)


class ModuleDescriptor(BaseModel):
    name: str
    module_dir: Path | None = None
    offline: bool = False
    download_sources: bool = True
    download_javadoc: bool = False
    scopes: dict[str, ScopeOverride] = Field(default_factory=dict)
    single_entry_libraries: dict[str, list[Path]] = Field(default_factory=dict)
    path_variables: dict[str, Path] = Field(default_factory=dict)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_whitespace(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    @field_validator("scopes", mode="before")
    @classmethod
    def _known_scope_names(cls, v: object) -> object:
        if not isinstance(v, dict):
            return v
        normalized: dict[str, object] = {}
        for key, value in v.items():
            name = str(key).strip().upper()
            if name not in Scope.__members__ and name not in LEGACY_SCOPE_ALIASES:
                raise ValueError(f"unknown scope '{key}'")
            if name in normalized:
                raise ValueError(f"scope '{key}' given more than once")
            normalized[name] = value
        return normalized

    @field_validator("single_entry_libraries", mode="before")
    @classmethod
    def _primitive_labels(cls, v: object) -> object:
        if not isinstance(v, dict):
            return v
        # "runtime" and "RUNTIME" name the same scope; their directories merge.
        normalized: dict[str, list] = {}
        for key, value in v.items():
            try:
                label = Scope.from_label(str(key)).label
            except UnknownScopeError as exc:
                raise ValueError(str(exc)) from exc
            if not isinstance(value, (list, tuple)):
                raise ValueError(f"libraries for scope '{key}' must be a list")
            normalized.setdefault(label, []).extend(value)
        return normalized

    @property
    def base_dir(self) -> Path:
        return self.module_dir if self.module_dir is not None else Path.cwd()

    def explicit_libraries(self) -> dict[str, list[Path]]:
        """Library directories per scope label, relative ones anchored at ``base_dir``."""
        return {
            label: [self.base_dir / p for p in paths]
            for label, paths in self.single_entry_libraries.items()
        }

    def path_factory(self) -> PathFactory:
        return PathFactory({"MODULE_DIR": self.base_dir, **self.path_variables})


def load_descriptor(
    path: Path | str, default_module_dir: Path | None = None
) -> ModuleDescriptor:
    """Load a JSON descriptor.

    A missing ``module_dir`` falls back to ``default_module_dir``, then to the
    file's directory; a relative one is anchored at the file's directory.
    """
    file = Path(path)
    try:
        raw = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DescriptorError(f"Cannot read descriptor {file}: {e}") from e

    try:
        descriptor = ModuleDescriptor.model_validate_json(raw)
    except ValidationError as e:
        raise DescriptorError(f"Invalid descriptor {file}: {e}") from e

    anchor = file.parent.resolve()
    if descriptor.module_dir is None:
        return descriptor.model_copy(update={"module_dir": default_module_dir or anchor})
    if not descriptor.module_dir.is_absolute():
        return descriptor.model_copy(update={"module_dir": anchor / descriptor.module_dir})
    return descriptor
