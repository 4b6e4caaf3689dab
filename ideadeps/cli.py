"""CLI entry point: ideadeps.

Subcommands:
    ideadeps create-config -o ideadeps.json     # Generate a module descriptor template
    ideadeps resolve /path/to/module            # Resolve IDE scopes for a Gradle module
    ideadeps resolve /path/to/module --json     # Same, as JSON
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from ideadeps.core.logging import LOG_FORMATS, setup_logging
from ideadeps.descriptor import ModuleDescriptor, load_descriptor
from ideadeps.exceptions import IdeaDepsError
from ideadeps.loader import load_buckets
from ideadeps.models import (
    ModuleDependency,
    ResolutionResult,
    ResolvedDependency,
    SingleEntryModuleLibrary,
)
from ideadeps.repository import LocalMavenRepository
from ideadeps.resolver import ScopeResolver

# Descriptor template
_CONFIG_TEMPLATE = {
    "name": "my-module",
    "offline": False,
    "download_sources": True,
    "download_javadoc": False,
    "scopes": {
        "PROVIDED": {"plus": [], "minus": []},
        "COMPILE": {"plus": [], "minus": []},
        "TEST": {"plus": [], "minus": []},
        "RUNTIME": {"plus": [], "minus": []},
    },
    "single_entry_libraries": {
        "RUNTIME": ["build/classes/java/main"],
        "TEST": ["build/classes/java/test"],
    },
    "path_variables": {},
}


def _record_row(dep: ResolvedDependency) -> dict:
    if isinstance(dep, ModuleDependency):
        return {"type": "module", "scope": dep.scope, "name": dep.name}
    return {
        "type": "library",
        "scope": dep.scope,
        "path": dep.library_file.path,
        "url": dep.library_file.url,
        "module_version": dep.module_version,
        "sources": [f.path for f in dep.sources],
        "javadoc": [f.path for f in dep.javadoc],
    }


def _describe(dep: ResolvedDependency) -> str:
    if isinstance(dep, SingleEntryModuleLibrary):
        label = dep.module_version or dep.library_file.path
        extras = []
        if dep.sources:
            extras.append("sources")
        if dep.javadoc:
            extras.append("javadoc")
        suffix = f"  (+{', '.join(extras)})" if extras else ""
        return f"library {label}{suffix}"
    return f"module  {dep.name}"


def _print_result(result: ResolutionResult, as_json: bool) -> None:
    if as_json:
        payload = {
            "dependencies": [_record_row(d) for d in result.dependencies],
            "unresolved": [u.display_name for u in result.unresolved],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    if not result.dependencies:
        click.echo("No dependencies resolved.")

    for scope, deps in result.by_scope().items():
        click.echo(f"{scope}:")
        for dep in deps:
            click.echo(f"  {_describe(dep)}")

    if result.unresolved:
        click.echo(f"\nUnresolved ({len(result.unresolved)}):")
        for dep in result.unresolved:
            click.echo(f"  {dep.display_name}  ({dep.reason})")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS),
    default=None,
    help="Log line format on stderr (default: $IDEADEPS_LOG_FORMAT or console)",
)
def main(verbose: bool, log_format: str | None) -> None:
    """ideadeps: assign IDE classpath scopes to a module's dependencies."""
    setup_logging("DEBUG" if verbose else None, log_format)


@main.command("create-config")
@click.option("-o", "--output", default="ideadeps.json", help="Output file path")
def create_config(output: str) -> None:
    """Generate a module descriptor template JSON file."""
    Path(output).write_text(json.dumps(_CONFIG_TEMPLATE, indent=2) + "\n")
    click.echo(f"Descriptor template written to {output}")
    click.echo("Edit the file, then run: ideadeps resolve <module dir> --config " + output)


@main.command("resolve")
@click.argument("project_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--config", "config_file", default=None, type=click.Path(), help="Module descriptor JSON")
@click.option("--repository", default=None, type=click.Path(), help="Local Maven repository root")
@click.option("--offline", is_flag=True, help="Skip repository artifacts")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def resolve(
    project_dir: str,
    config_file: str | None,
    repository: str | None,
    offline: bool,
    as_json: bool,
) -> None:
    """Resolve the IDE scope of every dependency of a module."""
    root = Path(project_dir).resolve()
    try:
        if config_file:
            descriptor = load_descriptor(config_file, default_module_dir=root)
        else:
            descriptor = ModuleDescriptor(name=root.name, module_dir=root)
        if offline:
            descriptor = descriptor.model_copy(update={"offline": True})

        registry = load_buckets(root)
        resolver = ScopeResolver(repository=LocalMavenRepository(repository))
        result = resolver.run(registry, descriptor)
    except IdeaDepsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _print_result(result, as_json)


if __name__ == "__main__":
    main()
